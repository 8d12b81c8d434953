"""Static NY Waterway ferry timetable (Paulus Hook to World Trade Center)."""

from __future__ import annotations

from datetime import UTC, datetime

from hblr_departures.domain.models.ferry_departure import (
    FerryDeparture,
    NextFerry,
    UpcomingFerries,
)

# Departures in minutes after midnight.
WEEKDAY_SCHEDULE: tuple[int, ...] = (
    # Morning rush 6:00-9:00, every 7-8 minutes
    360, 367, 375, 382, 390, 397, 405, 412,
    420, 427, 435, 442, 450, 457, 465, 472,
    480, 487, 495, 502, 510, 517, 525, 532, 540,
    # Midday 9:15-17:45, every 15 minutes
    555, 570, 585, 600, 615, 630, 645, 660, 675, 690, 705, 720, 735, 750, 765, 780,
    795, 810, 825, 840, 855, 870, 885, 900, 915, 930, 945, 960, 975, 990, 1005, 1020,
    1035, 1050, 1065,
    # Evening from 18:00, every 15 minutes, running past midnight
    1080, 1095, 1110, 1125, 1140, 1155, 1170, 1185, 1200, 1215, 1230, 1245, 1260,
    1275, 1290, 1305, 1320, 1335, 1350, 1365, 1380, 1395, 1410, 1425, 1440, 1455,
    1470, 1485, 1500, 1515, 1530, 1545, 1560, 1575, 1590, 1605, 1620, 1635, 1645,
)  # fmt: skip

# Weekend 10:10-19:40, every 30 minutes
WEEKEND_SCHEDULE: tuple[int, ...] = tuple(range(610, 1181, 30))

SERVICE_ENDED = "Service ended"


def format_minutes(minutes: int) -> str:
    """Format minutes after midnight as HH:MM, wrapping entries past midnight."""
    hours, mins = divmod(minutes % (24 * 60), 60)
    return f"{hours:02d}:{mins:02d}"


def _countdown(minutes_until: int) -> str:
    if minutes_until <= 0:
        return "Departed"
    if minutes_until == 1:
        return "in 1 min"
    return f"in {minutes_until} mins"


class FerrySchedule:
    """Looks up ferry departures in the weekday or weekend timetable."""

    def __init__(
        self,
        weekday_schedule: tuple[int, ...] = WEEKDAY_SCHEDULE,
        weekend_schedule: tuple[int, ...] = WEEKEND_SCHEDULE,
    ) -> None:
        self.weekday_schedule = weekday_schedule
        self.weekend_schedule = weekend_schedule

    @staticmethod
    def is_weekday(now: datetime) -> bool:
        return now.weekday() < 5

    def schedule_type(self, now: datetime) -> str:
        return "Weekday" if self.is_weekday(now) else "Weekend"

    def _remaining(self, now: datetime) -> tuple[int, list[int]]:
        current = now.hour * 60 + now.minute
        schedule = self.weekday_schedule if self.is_weekday(now) else self.weekend_schedule
        return current, [time for time in schedule if time > current]

    def next_departure(self, now: datetime) -> NextFerry:
        """Return the next ferry after ``now`` (local wall-clock time)."""
        current, remaining = self._remaining(now)
        if not remaining:
            return NextFerry(
                status=SERVICE_ENDED,
                next_departure_time="--:--",
                minutes_until=None,
                schedule_type=self.schedule_type(now),
                last_updated=datetime.now(UTC),
            )

        minutes_until = remaining[0] - current
        return NextFerry(
            status=_countdown(minutes_until),
            next_departure_time=format_minutes(remaining[0]),
            minutes_until=minutes_until,
            schedule_type=self.schedule_type(now),
            last_updated=datetime.now(UTC),
        )

    def upcoming(self, now: datetime, count: int = 3) -> UpcomingFerries:
        """Return up to ``count`` ferries after ``now``."""
        current, remaining = self._remaining(now)
        departures = tuple(
            FerryDeparture(
                departure_time=format_minutes(time),
                minutes_until=time - current,
                status=_countdown(time - current),
            )
            for time in remaining[: max(count, 0)]
        )
        return UpcomingFerries(
            upcoming=departures,
            schedule_type=self.schedule_type(now),
            last_updated=datetime.now(UTC),
        )
