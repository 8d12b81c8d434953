"""Departure classification by destination."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from hblr_departures.domain.models.classified_departures import ClassifiedDepartures
from hblr_departures.domain.models.departure import DepartureRecord

logger = logging.getLogger(__name__)

NORTHBOUND_KEYWORDS: tuple[str, ...] = ("HOBOKEN", "NEWPORT", "PAVONIA")
SOUTHBOUND_KEYWORDS: tuple[str, ...] = ("8TH STREET", "WEST SIDE", "TONNELLE")
DEPARTURES_PER_DIRECTION = 3


def to_departure_record(raw: Mapping[str, Any]) -> DepartureRecord | None:
    """Build a departure from a raw source record.

    Returns None when the record has no destination to classify by.
    """
    destination = raw.get("header")
    if not isinstance(destination, str) or not destination.strip():
        return None
    return DepartureRecord(
        destination=destination,
        time=str(raw.get("departuretime") or ""),
        status=str(raw.get("departurestatus") or ""),
        scheduled_time=str(raw.get("schedDepTime") or ""),
    )


def _matches_any(destination: str, keywords: Iterable[str]) -> bool:
    upper = destination.upper()
    return any(keyword.upper() in upper for keyword in keywords)


def classify_departures(
    raw_records: Iterable[Any],
    northbound_keywords: Iterable[str] = NORTHBOUND_KEYWORDS,
    southbound_keywords: Iterable[str] = SOUTHBOUND_KEYWORDS,
    limit: int = DEPARTURES_PER_DIRECTION,
) -> ClassifiedDepartures:
    """Split raw departures into northbound and southbound buckets.

    Source order is kept (the source lists trains chronologically) and each
    bucket is cut to the first ``limit`` entries. Records whose destination
    matches neither keyword set are dropped.

    Args:
        raw_records: Raw departure records as delivered by the source page.
        northbound_keywords: Destination substrings meaning "northbound".
        southbound_keywords: Destination substrings meaning "southbound".
        limit: Maximum departures kept per direction.

    Returns:
        The two directional buckets.
    """
    north_keys = tuple(northbound_keywords)
    south_keys = tuple(southbound_keywords)
    northbound: list[DepartureRecord] = []
    southbound: list[DepartureRecord] = []
    dropped = 0

    for raw in raw_records:
        if not isinstance(raw, Mapping):
            dropped += 1
            continue
        departure = to_departure_record(raw)
        if departure is None:
            dropped += 1
        elif _matches_any(departure.destination, north_keys):
            northbound.append(departure)
        elif _matches_any(departure.destination, south_keys):
            southbound.append(departure)
        else:
            dropped += 1

    if dropped:
        logger.debug(f"Dropped {dropped} departure(s) matching no direction")

    return ClassifiedDepartures(
        northbound=tuple(northbound[:limit]),
        southbound=tuple(southbound[:limit]),
    )
