"""Relative departure countdowns ("in 7 mins") from source time strings."""

import logging
import math
import re
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

_CLOCK_TIME = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)

# Source format is "8/2/2025 11:27:00 PM"; the others are tolerated variants.
_SCHEDULED_FORMATS = (
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)


def _parse_scheduled(scheduled_time: str) -> datetime:
    text = scheduled_time.strip()
    if "/" not in text:
        return datetime.fromisoformat(text)
    for fmt in _SCHEDULED_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized scheduled time: {scheduled_time!r}")


def _parse_clock_time(display_time: str, now: datetime) -> datetime:
    """Anchor a 12-hour clock time to today, or tomorrow if already past."""
    match = _CLOCK_TIME.search(display_time)
    if not match:
        raise ValueError(f"Unrecognized display time: {display_time!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    meridiem = match.group(3).upper()
    if meridiem == "PM" and hours != 12:
        hours += 12
    elif meridiem == "AM" and hours == 12:
        hours = 0

    target = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if target < now:
        target += timedelta(days=1)
    return target


def _align(target: datetime, now: datetime) -> datetime:
    """Make target comparable with now when only one of them carries a timezone."""
    if target.tzinfo is not None and now.tzinfo is None:
        return target.astimezone().replace(tzinfo=None)
    if target.tzinfo is None and now.tzinfo is not None:
        return target.replace(tzinfo=now.tzinfo)
    return target


def _has_date_separator(value: str) -> bool:
    return "/" in value or re.search(r"\d{4}-\d{2}-\d{2}", value) is not None


def format_countdown(minutes: int) -> str:
    """Format a whole number of minutes as a countdown string."""
    if minutes <= 0:
        return "Now"
    if minutes == 1:
        return "in 1 min"
    if minutes < 60:
        return f"in {minutes} mins"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return "in 1 hour" if hours == 1 else f"in {hours} hours"
    return f"in {hours}h {mins}m"


def _fallback(display_time: str | None) -> str:
    if display_time and any(char.isdigit() for char in display_time):
        return display_time
    return UNKNOWN


def relative_time(
    display_time: str | None,
    scheduled_time: str | None,
    now: datetime | None = None,
) -> str:
    """Compute a countdown until a departure.

    The absolute ``scheduled_time`` wins when it carries a date. Otherwise the
    12-hour ``display_time`` is anchored to today's date and rolled to tomorrow
    when it has already passed.

    Never raises: unusable input yields the display time itself, or "Unknown"
    when that is not a time either.
    """
    if not display_time and not scheduled_time:
        return UNKNOWN

    current = now if now is not None else datetime.now()
    try:
        if scheduled_time and _has_date_separator(scheduled_time):
            target = _align(_parse_scheduled(scheduled_time), current)
        elif display_time:
            target = _parse_clock_time(display_time, current)
        else:
            return _fallback(display_time)

        diff_minutes = math.floor((target - current).total_seconds() / 60 + 0.5)
        return format_countdown(diff_minutes)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Could not compute countdown for {display_time!r}/{scheduled_time!r}: {e}")
        return _fallback(display_time)
