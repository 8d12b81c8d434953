"""Classified departures domain model."""

from dataclasses import dataclass, field

from hblr_departures.domain.models.departure import DepartureRecord


@dataclass(frozen=True)
class ClassifiedDepartures:
    """Departures split into the two directional buckets."""

    northbound: tuple[DepartureRecord, ...] = field(default_factory=tuple)
    southbound: tuple[DepartureRecord, ...] = field(default_factory=tuple)
