"""Tests for direction classification."""

from typing import Any

from hblr_departures.application.services.departure_classifier import (
    classify_departures,
    to_departure_record,
)
from hblr_departures.domain.models import DepartureRecord
from tests.fakes import raw_departure


def test_hoboken_terminal_is_northbound() -> None:
    """Given a Hoboken Terminal train, when classifying, then it is northbound."""
    result = classify_departures([raw_departure("HOBOKEN TERMINAL LIGHT RAIL STATION")])

    assert [d.destination for d in result.northbound] == ["HOBOKEN TERMINAL LIGHT RAIL STATION"]
    assert result.southbound == ()


def test_eighth_street_is_southbound() -> None:
    """Given an 8th Street train, when classifying, then it is southbound."""
    result = classify_departures([raw_departure("8TH STREET LIGHT RAIL STATION")])

    assert result.northbound == ()
    assert [d.destination for d in result.southbound] == ["8TH STREET LIGHT RAIL STATION"]


def test_destination_matching_no_keywords_is_dropped() -> None:
    """Given a destination matching neither direction, when classifying, then it is excluded."""
    result = classify_departures([raw_departure("LIBERTY STATE PARK LIGHT RAIL STATION")])

    assert result.northbound == ()
    assert result.southbound == ()


def test_buckets_are_capped_and_keep_source_order() -> None:
    """Given many matching trains, when classifying, then each bucket keeps the first three."""
    raw = [
        raw_departure("TONNELLE AVENUE", "10:00 PM"),
        raw_departure("HOBOKEN TERMINAL", "10:01 PM"),
        raw_departure("NEWPORT", "10:02 PM"),
        raw_departure("BAYONNE FLYER", "10:03 PM"),
        raw_departure("PAVONIA", "10:04 PM"),
        raw_departure("HOBOKEN TERMINAL", "10:05 PM"),
        raw_departure("WEST SIDE AVENUE", "10:06 PM"),
    ]

    result = classify_departures(raw)

    assert [d.time for d in result.northbound] == ["10:01 PM", "10:02 PM", "10:04 PM"]
    assert [d.time for d in result.southbound] == ["10:00 PM", "10:06 PM"]


def test_every_output_record_appears_in_one_bucket_only() -> None:
    """Given mixed trains, when classifying, then no record lands in both buckets."""
    raw = [raw_departure(name) for name in ("HOBOKEN", "8TH STREET", "NEWPORT", "WEST SIDE")]

    result = classify_departures(raw, limit=10)

    assert not set(result.northbound) & set(result.southbound)
    assert len(result.northbound) + len(result.southbound) == 4


def test_matching_is_case_insensitive() -> None:
    """Given a mixed-case destination, when classifying, then keywords still match."""
    result = classify_departures([raw_departure("Hoboken Terminal")])

    assert len(result.northbound) == 1


def test_custom_keywords_and_limit() -> None:
    """Given custom keyword sets, when classifying, then they are used."""
    raw = [raw_departure("EXCHANGE PLACE"), raw_departure("BAYONNE"), raw_departure("BAYONNE")]

    result = classify_departures(
        raw, northbound_keywords=["EXCHANGE"], southbound_keywords=["BAYONNE"], limit=1
    )

    assert len(result.northbound) == 1
    assert len(result.southbound) == 1


def test_records_without_destination_or_not_mappings_are_dropped() -> None:
    """Given malformed records, when classifying, then they are skipped without error."""
    raw: list[Any] = [{"departuretime": "11:27 PM"}, {"header": "   "}, "HOBOKEN", None]

    result = classify_departures(raw)

    assert result.northbound == ()
    assert result.southbound == ()


def test_raw_record_fields_are_mapped() -> None:
    """Given a raw source record, when converting, then all fields are mapped."""
    record = to_departure_record(
        {
            "header": "HOBOKEN TERMINAL",
            "departuretime": "11:27 PM",
            "departurestatus": "in 7 mins",
            "schedDepTime": "8/2/2025 11:27:00 PM",
        }
    )

    assert record == DepartureRecord(
        destination="HOBOKEN TERMINAL",
        time="11:27 PM",
        status="in 7 mins",
        scheduled_time="8/2/2025 11:27:00 PM",
    )


def test_missing_optional_fields_become_empty_strings() -> None:
    """Given a record with only a destination, when converting, then other fields are empty."""
    record = to_departure_record({"header": "NEWPORT", "departurestatus": None})

    assert record is not None
    assert record.time == ""
    assert record.status == ""
    assert record.scheduled_time == ""
