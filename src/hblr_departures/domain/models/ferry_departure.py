"""Ferry departure domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from hblr_departures.domain.models.scrape_snapshot import format_timestamp


@dataclass(frozen=True)
class FerryDeparture:
    """An upcoming ferry departure from the static timetable."""

    departure_time: str  # "HH:MM"
    minutes_until: int
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "departureTime": self.departure_time,
            "minutesUntil": self.minutes_until,
            "status": self.status,
        }


@dataclass(frozen=True)
class NextFerry:
    """The next ferry departure, or the end-of-service marker."""

    status: str
    next_departure_time: str
    minutes_until: int | None
    schedule_type: str
    last_updated: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "nextDepartureTime": self.next_departure_time,
            "minutesUntil": self.minutes_until,
            "scheduleType": self.schedule_type,
            "lastUpdated": format_timestamp(self.last_updated),
        }


@dataclass(frozen=True)
class UpcomingFerries:
    """The next few ferry departures."""

    upcoming: tuple[FerryDeparture, ...]
    schedule_type: str
    last_updated: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "upcoming": [departure.to_dict() for departure in self.upcoming],
            "scheduleType": self.schedule_type,
            "lastUpdated": format_timestamp(self.last_updated),
        }
