"""Starlette application exposing cached departures and the ferry timetable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from hblr_departures.adapters.web.rate_limit_middleware import RateLimitMiddleware
from hblr_departures.application.services.snapshot_view import next_departure_summary

if TYPE_CHECKING:
    from hblr_departures.adapters.config.app_config import AppConfig
    from hblr_departures.adapters.scraper.scrape_coordinator import ScrapeCoordinator
    from hblr_departures.application.services.ferry_schedule import FerrySchedule

logger = logging.getLogger(__name__)

DEFAULT_FERRY_COUNT = 3
MAX_FERRY_COUNT = 50

ENDPOINTS = {
    "light-rail-departures": "/api/departures",
    "light-rail-status": "/api/status",
    "ferry-next": "/api/ferry",
    "ferry-upcoming": "/api/ferry/upcoming",
    "northbound": "/api/northbound",
    "southbound": "/api/southbound",
}


def _error_response(error: str, exc: Exception) -> JSONResponse:
    logger.error(f"{error}: {exc}", exc_info=True)
    return JSONResponse({"error": error, "message": str(exc)}, status_code=500)


def _parse_count(raw: str | None) -> int:
    try:
        count = int(raw) if raw is not None else 0
    except ValueError:
        count = 0
    if count <= 0:
        return DEFAULT_FERRY_COUNT
    return min(count, MAX_FERRY_COUNT)


class DepartureApi:
    """HTTP handlers over the scrape coordinator and ferry schedule."""

    def __init__(
        self,
        coordinator: ScrapeCoordinator,
        ferry_schedule: FerrySchedule,
        config: AppConfig,
    ) -> None:
        self.coordinator = coordinator
        self.ferry_schedule = ferry_schedule
        self.config = config

    async def index(self, _request: Request) -> Response:
        return JSONResponse(
            {
                "service": "NJ Transit Light Rail & Ferry Scraper",
                "status": "running",
                "endpoints": ENDPOINTS,
            }
        )

    async def departures(self, _request: Request) -> Response:
        try:
            return JSONResponse(self.coordinator.get_cached_data())
        except Exception as e:
            return _error_response("Failed to get cached data", e)

    async def status(self, _request: Request) -> Response:
        snapshot = self.coordinator.last_data
        view = snapshot.to_dict()
        interval = self.config.scrape_interval_minutes
        scheduled = self.coordinator.is_scheduled
        return JSONResponse(
            {
                "status": view["status"],
                "lastUpdated": view["lastUpdated"],
                "lastAttempt": view["lastAttempt"],
                "error": snapshot.error,
                "isRunning": self.coordinator.is_running,
                "scheduledScraping": scheduled,
                "scrapeIntervalMinutes": interval,
                "nextScrapeIn": f"{interval} minutes or less" if scheduled else "Not scheduled",
            }
        )

    async def scrape(self, _request: Request) -> Response:
        logger.info("Manual scrape requested via API")
        try:
            snapshot = await self.coordinator.scrape()
        except Exception as e:
            return _error_response("Manual scrape failed", e)
        return JSONResponse({"message": "Manual scrape completed", "data": snapshot.to_dict()})

    async def _direction(self, direction: str) -> Response:
        try:
            view = self.coordinator.get_cached_data()
            return JSONResponse(next_departure_summary(view, direction))
        except Exception as e:
            return _error_response(f"Failed to get {direction} data", e)

    async def northbound(self, _request: Request) -> Response:
        return await self._direction("northbound")

    async def southbound(self, _request: Request) -> Response:
        return await self._direction("southbound")

    async def ferry(self, _request: Request) -> Response:
        try:
            return JSONResponse(self.ferry_schedule.next_departure(self.config.local_now()).to_dict())
        except Exception as e:
            return _error_response("Failed to get ferry data", e)

    async def ferry_upcoming(self, request: Request) -> Response:
        count = _parse_count(request.query_params.get("count"))
        try:
            upcoming = self.ferry_schedule.upcoming(self.config.local_now(), count)
            return JSONResponse(upcoming.to_dict())
        except Exception as e:
            return _error_response("Failed to get upcoming ferry data", e)

    async def healthz(self, _request: Request) -> Response:
        return PlainTextResponse("ok", headers={"Cache-Control": "no-store"})

    def routes(self) -> list[Route]:
        return [
            Route("/", self.index, methods=["GET"]),
            Route("/api/departures", self.departures, methods=["GET"]),
            Route("/api/status", self.status, methods=["GET"]),
            Route("/api/scrape", self.scrape, methods=["POST"]),
            Route("/api/northbound", self.northbound, methods=["GET"]),
            Route("/api/southbound", self.southbound, methods=["GET"]),
            Route("/api/ferry", self.ferry, methods=["GET"]),
            Route("/api/ferry/upcoming", self.ferry_upcoming, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
        ]


def create_app(
    coordinator: ScrapeCoordinator,
    ferry_schedule: FerrySchedule,
    config: AppConfig,
) -> Starlette:
    """Build the ASGI application."""
    api = DepartureApi(coordinator, ferry_schedule, config)
    middleware: list[Any] = [
        Middleware(
            CORSMiddleware,
            allow_origins=config.cors_allowed_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        ),
        Middleware(
            RateLimitMiddleware,
            requests_per_minute=config.manual_scrape_limit_per_minute,
        ),
    ]
    return Starlette(routes=api.routes(), middleware=middleware)
