"""Fixed identifiers of the NJ Transit DepartureVision page markup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hblr_departures.adapters.config.app_config import AppConfig


@dataclass(frozen=True)
class SourcePageProfile:
    """Element identifiers, labels and form values the page interaction relies on.

    These mirror the site's current markup and break when it is redesigned.
    """

    line_value: str = "Hudson-Bergen Light Rail"
    origin_value: str = "ESSEX STREET LIGHT RAIL STATION"

    # Bootstrap-Vue generated tab buttons of the trip planner form
    rail_tab_id: str = "__BVID__335___BV_tab_button__"
    light_rail_tab_id: str = "__BVID__343___BV_tab_button__"
    tab_label: str = "light rail"
    tab_id_marker: str = "BV_tab_button"

    line_field_id: str = "line"
    origin_field_id: str = "the-origin"

    submit_label: str = "get departures"
    fallback_submit_label: str = "departures"

    # The departure board data arrives through this call only
    data_endpoint_marker: str = "graphql"
    data_endpoint_method: str = "POST"

    @classmethod
    def from_config(cls, config: AppConfig) -> SourcePageProfile:
        return cls(line_value=config.line_name, origin_value=config.origin_name)
