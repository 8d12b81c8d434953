"""Application services."""

from hblr_departures.application.services.departure_classifier import classify_departures
from hblr_departures.application.services.ferry_schedule import FerrySchedule
from hblr_departures.application.services.relative_time import relative_time
from hblr_departures.application.services.snapshot_view import (
    build_snapshot_view,
    next_departure_summary,
)

__all__ = [
    "FerrySchedule",
    "build_snapshot_view",
    "classify_departures",
    "next_departure_summary",
    "relative_time",
]
