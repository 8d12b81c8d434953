"""Domain models for light rail and ferry departures."""

from hblr_departures.domain.models.classified_departures import ClassifiedDepartures
from hblr_departures.domain.models.departure import DepartureRecord
from hblr_departures.domain.models.ferry_departure import (
    FerryDeparture,
    NextFerry,
    UpcomingFerries,
)
from hblr_departures.domain.models.navigation_report import NavigationReport
from hblr_departures.domain.models.scrape_snapshot import ScrapeSnapshot, ScrapeStatus

__all__ = [
    "ClassifiedDepartures",
    "DepartureRecord",
    "FerryDeparture",
    "NavigationReport",
    "NextFerry",
    "ScrapeSnapshot",
    "ScrapeStatus",
    "UpcomingFerries",
]
