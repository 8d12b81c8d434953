"""Scrape snapshot domain model.

A snapshot is the single cached result the service serves. It is frozen: every
scrape attempt produces a new snapshot derived from the previous one, so readers
never observe a half-written result.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from hblr_departures.domain.models.classified_departures import ClassifiedDepartures
from hblr_departures.domain.models.departure import DepartureRecord


class ScrapeStatus(StrEnum):
    """Outcome of the most recent scrape attempt."""

    INITIALIZING = "initializing"
    SUCCESS = "success"
    NO_DATA = "no_data"
    ERROR = "error"


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp as ISO 8601 with millisecond precision and a Z suffix."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ScrapeSnapshot:
    """Last known light rail departures plus the status of the latest attempt."""

    northbound: tuple[DepartureRecord, ...] = field(default_factory=tuple)
    southbound: tuple[DepartureRecord, ...] = field(default_factory=tuple)
    last_updated: datetime | None = None
    status: ScrapeStatus = ScrapeStatus.INITIALIZING
    error: str | None = None
    last_attempt: datetime | None = None

    @property
    def has_data(self) -> bool:
        """Whether at least one scrape has ever succeeded."""
        return self.last_updated is not None

    def succeeded(self, departures: ClassifiedDepartures, at: datetime) -> ScrapeSnapshot:
        """Return the snapshot produced by a successful scrape."""
        return ScrapeSnapshot(
            northbound=departures.northbound,
            southbound=departures.southbound,
            last_updated=at,
            status=ScrapeStatus.SUCCESS,
            error=None,
            last_attempt=at,
        )

    def without_data(self, at: datetime) -> ScrapeSnapshot:
        """Return the snapshot for an attempt that captured no departures.

        Previously cached buckets and their timestamp are kept.
        """
        return replace(self, status=ScrapeStatus.NO_DATA, error=None, last_attempt=at)

    def failed(self, message: str, at: datetime) -> ScrapeSnapshot:
        """Return the snapshot for an attempt that raised an error.

        Previously cached buckets and their timestamp are kept.
        """
        return replace(self, status=ScrapeStatus.ERROR, error=message, last_attempt=at)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape served by the API."""
        data: dict[str, Any] = {
            "northbound": [departure.to_dict() for departure in self.northbound],
            "southbound": [departure.to_dict() for departure in self.southbound],
            "lastUpdated": format_timestamp(self.last_updated),
            "lastAttempt": format_timestamp(self.last_attempt),
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
