"""Domain layer - core models, errors and contracts."""

from hblr_departures.domain.errors import BrowserLaunchError, SessionNotStartedError
from hblr_departures.domain.models import (
    ClassifiedDepartures,
    DepartureRecord,
    ScrapeSnapshot,
    ScrapeStatus,
)

__all__ = [
    "BrowserLaunchError",
    "ClassifiedDepartures",
    "DepartureRecord",
    "ScrapeSnapshot",
    "ScrapeStatus",
    "SessionNotStartedError",
]
