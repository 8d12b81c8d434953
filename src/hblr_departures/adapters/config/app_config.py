"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote, urlencode
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# TOML table -> fields it may override
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "server": ("host", "port", "log_level", "cors_allowed_origins"),
    "scraper": (
        "source_base_url",
        "line_name",
        "origin_name",
        "headless",
        "user_agent",
        "navigation_timeout_seconds",
        "scrape_interval_minutes",
        "initial_scrape_delay_seconds",
        "departures_per_direction",
        "manual_scrape_limit_per_minute",
        "timezone",
    ),
    "directions": ("northbound_keywords", "southbound_keywords"),
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allowed_origins: list[str] = Field(
        default=["*"], description="Origins allowed to call the API from a browser"
    )

    # Source page
    source_base_url: str = Field(
        default="https://www.njtransit.com/dv-to",
        description="NJ Transit DepartureVision page",
    )
    line_name: str = Field(default="Hudson-Bergen Light Rail", description="Transit line")
    origin_name: str = Field(
        default="ESSEX STREET LIGHT RAIL STATION", description="Origin station"
    )

    # Browser
    headless: bool = Field(default=True, description="Run the browser without a window")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Browser user agent")
    navigation_timeout_seconds: int = Field(
        default=60, description="Timeout for opening the source page in seconds"
    )

    # Scheduling
    scrape_interval_minutes: int = Field(
        default=3, description="Interval between scheduled scrapes in minutes"
    )
    initial_scrape_delay_seconds: float = Field(
        default=2.0, description="Delay before the first scheduled scrape in seconds"
    )
    departures_per_direction: int = Field(
        default=3, description="Number of departures kept per direction"
    )
    manual_scrape_limit_per_minute: int = Field(
        default=6, description="Manual scrape requests allowed per client IP per minute"
    )

    # Direction classification
    northbound_keywords: list[str] = Field(
        default=["HOBOKEN", "NEWPORT", "PAVONIA"],
        description="Destination substrings classified as northbound",
    )
    southbound_keywords: list[str] = Field(
        default=["8TH STREET", "WEST SIDE", "TONNELLE"],
        description="Destination substrings classified as southbound",
    )

    timezone: str = Field(
        default="America/New_York",
        description="Timezone of the departure board clock (IANA timezone name)",
    )

    config_file: str | None = Field(
        default=None,
        description="Optional TOML file overriding [server], [scraper] and [directions] settings",
    )

    @field_validator(
        "scrape_interval_minutes",
        "departures_per_direction",
        "navigation_timeout_seconds",
        "manual_scrape_limit_per_minute",
    )
    @classmethod
    def validate_positive(cls, v: int, info: ValidationInfo) -> int:
        """Validate that counts and intervals are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone name: {v}") from e
        return v

    @field_validator("northbound_keywords", "southbound_keywords")
    @classmethod
    def validate_keywords(cls, v: list[str], info: ValidationInfo) -> list[str]:
        """Validate keyword sets are non-empty and do not overlap."""
        keywords = [keyword.strip().upper() for keyword in v if keyword.strip()]
        if not keywords:
            raise ValueError(f"{info.field_name} must contain at least one keyword")
        if info.field_name == "southbound_keywords":
            northbound = set(info.data.get("northbound_keywords") or [])
            overlap = northbound & set(keywords)
            if overlap:
                raise ValueError(
                    f"northbound_keywords and southbound_keywords overlap: {sorted(overlap)}"
                )
        return keywords

    @property
    def source_url(self) -> str:
        """Departure board URL for the configured line and origin."""
        query = urlencode({"line": self.line_name, "origin": self.origin_name}, quote_via=quote)
        return f"{self.source_base_url}?{query}"

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def local_now(self) -> datetime:
        """Current wall-clock time of the departure board, without tzinfo."""
        return datetime.now(self.zone).replace(tzinfo=None)

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file."""
        if not self.config_file:
            raise ValueError("config_file must be set to load a configuration file")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            return tomllib.load(f)

    def apply_config_file(self) -> "AppConfig":
        """Return a copy of this config with TOML overrides applied and validated.

        Environment variables keep their defaults role; any key present in the
        TOML file wins. Without a config_file the config is returned unchanged.
        """
        if not self.config_file:
            return self

        toml_data = self._load_toml_data()
        overrides: dict[str, Any] = {}
        for section, fields in _TOML_SECTIONS.items():
            table = toml_data.get(section, {})
            if not isinstance(table, dict):
                raise ValueError(f"TOML config '{section}' must be a table")
            overrides.update({key: table[key] for key in fields if key in table})

        if not overrides:
            return self
        return AppConfig(**{**self.model_dump(), **overrides})
