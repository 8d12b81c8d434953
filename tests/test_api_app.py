"""Tests for the HTTP API."""

from datetime import UTC, datetime
from unittest.mock import ANY, AsyncMock, MagicMock

import pytest
from starlette.testclient import TestClient

from hblr_departures.adapters.config import AppConfig
from hblr_departures.adapters.web.api_app import ENDPOINTS, _parse_count, create_app
from hblr_departures.application.services import FerrySchedule
from hblr_departures.domain.models import ScrapeSnapshot

SCRAPED_AT = datetime(2025, 8, 3, 3, 20, 0, tzinfo=UTC)

CACHED_VIEW = {
    "northbound": [
        {
            "destination": "HOBOKEN",
            "time": "11:27 PM",
            "status": "in 7 mins",
            "scheduledTime": "8/2/2025 11:27:00 PM",
            "calculatedStatus": "in 5 mins",
        }
    ],
    "southbound": [],
    "lastUpdated": "2025-08-03T03:20:00.000Z",
    "lastAttempt": "2025-08-03T03:20:00.000Z",
    "status": "success",
}


@pytest.fixture
def coordinator() -> MagicMock:
    coordinator = MagicMock()
    coordinator.get_cached_data.return_value = CACHED_VIEW
    coordinator.last_data = ScrapeSnapshot().failed("Timeout", SCRAPED_AT)
    coordinator.is_running = False
    coordinator.is_scheduled = True
    coordinator.scrape = AsyncMock(return_value=ScrapeSnapshot().without_data(SCRAPED_AT))
    return coordinator


def make_client(coordinator: MagicMock, ferry_schedule=None, **config) -> TestClient:
    app = create_app(coordinator, ferry_schedule or FerrySchedule(), AppConfig(**config))
    return TestClient(app)


def test_index_lists_endpoints(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"
    assert response.json()["endpoints"] == ENDPOINTS


def test_departures_returns_cached_view(coordinator: MagicMock) -> None:
    """Given cached data, when reading departures, then no scrape is triggered."""
    response = make_client(coordinator).get("/api/departures")

    assert response.status_code == 200
    assert response.json() == CACHED_VIEW
    coordinator.scrape.assert_not_awaited()


def test_departures_failure_returns_500(coordinator: MagicMock) -> None:
    coordinator.get_cached_data.side_effect = RuntimeError("corrupt cache")

    response = make_client(coordinator).get("/api/departures")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to get cached data",
        "message": "corrupt cache",
    }


def test_status_reports_scheduler_and_last_attempt(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/api/status")

    assert response.json() == {
        "status": "error",
        "lastUpdated": None,
        "lastAttempt": "2025-08-03T03:20:00.000Z",
        "error": "Timeout",
        "isRunning": False,
        "scheduledScraping": True,
        "scrapeIntervalMinutes": 3,
        "nextScrapeIn": "3 minutes or less",
    }


def test_status_when_not_scheduled(coordinator: MagicMock) -> None:
    coordinator.is_scheduled = False

    response = make_client(coordinator).get("/api/status")

    assert response.json()["nextScrapeIn"] == "Not scheduled"


def test_manual_scrape_returns_snapshot(coordinator: MagicMock) -> None:
    """Given a manual scrape request, when posted, then the new snapshot is returned."""
    response = make_client(coordinator).post("/api/scrape")

    assert response.status_code == 200
    assert response.json()["message"] == "Manual scrape completed"
    assert response.json()["data"]["status"] == "no_data"
    coordinator.scrape.assert_awaited_once()


def test_manual_scrape_is_rate_limited(coordinator: MagicMock) -> None:
    """Given a limit of two per minute, when posting three times, then the third gets 429."""
    client = make_client(coordinator, manual_scrape_limit_per_minute=2)

    statuses = [client.post("/api/scrape").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    assert coordinator.scrape.await_count == 2


def test_reads_are_not_rate_limited(coordinator: MagicMock) -> None:
    client = make_client(coordinator, manual_scrape_limit_per_minute=1)

    statuses = {client.get("/api/departures").status_code for _ in range(5)}

    assert statuses == {200}


def test_scrape_requires_post(coordinator: MagicMock) -> None:
    assert make_client(coordinator).get("/api/scrape").status_code == 405


def test_northbound_summary(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/api/northbound")

    assert response.json()["status"] == "in 5 mins"
    assert response.json()["destination"] == "HOBOKEN"
    assert response.json()["originalStatus"] == "in 7 mins"


def test_southbound_without_trains(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/api/southbound")

    assert response.json()["status"] == "No trains"


def test_ferry_next_departure(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/api/ferry")

    assert response.status_code == 200
    assert response.json()["scheduleType"] in ("Weekday", "Weekend")


def test_ferry_upcoming_passes_count(coordinator: MagicMock) -> None:
    ferry_schedule = MagicMock()
    ferry_schedule.upcoming.return_value.to_dict.return_value = {"upcoming": []}

    response = make_client(coordinator, ferry_schedule).get("/api/ferry/upcoming?count=5")

    assert response.json() == {"upcoming": []}
    ferry_schedule.upcoming.assert_called_once_with(ANY, 5)


def test_ferry_failure_returns_500(coordinator: MagicMock) -> None:
    ferry_schedule = MagicMock()
    ferry_schedule.next_departure.side_effect = RuntimeError("bad timetable")

    response = make_client(coordinator, ferry_schedule).get("/api/ferry")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get ferry data"


def test_healthz(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get("/healthz")

    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["Cache-Control"] == "no-store"


def test_cors_headers_present(coordinator: MagicMock) -> None:
    response = make_client(coordinator).get(
        "/api/departures", headers={"Origin": "https://dashboard.example.com"}
    )

    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 3), ("5", 5), ("0", 3), ("-2", 3), ("abc", 3), ("500", 50)],
)
def test_parse_count(raw: str | None, expected: int) -> None:
    assert _parse_count(raw) == expected
