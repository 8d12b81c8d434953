"""Read-side view of the cached snapshot with live countdowns."""

from datetime import datetime
from typing import Any

from hblr_departures.application.services.relative_time import relative_time
from hblr_departures.domain.models.departure import DepartureRecord
from hblr_departures.domain.models.scrape_snapshot import ScrapeSnapshot

NO_DATA_MESSAGE = "No data available yet. Waiting for first scrape..."
NO_TRAINS = "No trains"


def _annotate(departure: DepartureRecord, now: datetime) -> dict[str, Any]:
    data: dict[str, Any] = departure.to_dict()
    data["calculatedStatus"] = relative_time(departure.time, departure.scheduled_time, now)
    return data


def build_snapshot_view(snapshot: ScrapeSnapshot, now: datetime) -> dict[str, Any]:
    """Serialize a snapshot, adding a countdown to every departure.

    The snapshot itself is not touched. Before the first successful scrape the
    view carries an explanatory ``message`` instead of countdowns.

    Args:
        snapshot: The cached snapshot.
        now: Local wall-clock time the countdowns are computed against.
    """
    view = snapshot.to_dict()
    if not snapshot.has_data:
        view["message"] = NO_DATA_MESSAGE
        return view

    view["northbound"] = [_annotate(departure, now) for departure in snapshot.northbound]
    view["southbound"] = [_annotate(departure, now) for departure in snapshot.southbound]
    return view


def next_departure_summary(view: dict[str, Any], direction: str) -> dict[str, Any]:
    """Summarize the next train of one direction from a snapshot view."""
    departures = view.get(direction) or []
    upcoming = departures[0] if departures else None
    if upcoming is None:
        return {
            "status": NO_TRAINS,
            "destination": "",
            "time": "",
            "lastUpdated": view.get("lastUpdated"),
            "originalStatus": "",
            "scheduledTime": "",
        }
    return {
        "status": upcoming.get("calculatedStatus") or upcoming.get("status") or NO_TRAINS,
        "destination": upcoming.get("destination", ""),
        "time": upcoming.get("time", ""),
        "lastUpdated": view.get("lastUpdated"),
        "originalStatus": upcoming.get("status", ""),
        "scheduledTime": upcoming.get("scheduledTime", ""),
    }
