"""Single-flight scrape orchestration and periodic refresh."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from hblr_departures.adapters.browser.page_profile import SourcePageProfile
from hblr_departures.adapters.browser.response_interceptor import ResponseInterceptor
from hblr_departures.application.services.departure_classifier import classify_departures
from hblr_departures.application.services.snapshot_view import build_snapshot_view

if TYPE_CHECKING:
    from hblr_departures.adapters.config.app_config import AppConfig
    from hblr_departures.domain.contracts import (
        BrowserSessionProtocol,
        PageNavigatorProtocol,
        SnapshotStoreProtocol,
    )
    from hblr_departures.domain.models.scrape_snapshot import ScrapeSnapshot

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ScrapeCoordinator:
    """Runs at most one scrape at a time and writes its outcome to the cache.

    A scrape opens a page, subscribes a ResponseInterceptor, loads the source
    page, lets the navigator trigger the data-fetch call, closes the page and
    classifies whatever the interceptor captured. Every scrape ends in a new
    snapshot; no exception escapes scrape().
    """

    def __init__(
        self,
        config: AppConfig,
        session: BrowserSessionProtocol,
        navigator: PageNavigatorProtocol,
        cache: SnapshotStoreProtocol,
        interceptor_factory: Callable[[], ResponseInterceptor] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the coordinator.

        Args:
            config: Application configuration.
            session: Browser session handing out pages.
            navigator: Drives a loaded page to the data-fetch call.
            cache: Snapshot store written after every scrape.
            interceptor_factory: Creates the per-scrape response interceptor.
            clock: Source of snapshot timestamps.
        """
        self.config = config
        self.session = session
        self.navigator = navigator
        self.cache = cache
        self.clock = clock
        if interceptor_factory is None:
            profile = SourcePageProfile.from_config(config)

            def default_factory() -> ResponseInterceptor:
                return ResponseInterceptor(
                    url_marker=profile.data_endpoint_marker,
                    method=profile.data_endpoint_method,
                )

            interceptor_factory = default_factory

        self.interceptor_factory = interceptor_factory
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Whether a scrape is in flight."""
        return self._running

    @property
    def is_scheduled(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_data(self) -> ScrapeSnapshot:
        return self.cache.snapshot

    def get_cached_data(self) -> dict[str, Any]:
        """Return the cached snapshot with live countdowns for each departure."""
        return build_snapshot_view(self.cache.snapshot, self.config.local_now())

    async def scrape(self) -> ScrapeSnapshot:
        """Scrape once, or return the cached snapshot if a scrape is in flight."""
        # Check and set happen without an await in between; the event loop
        # cannot interleave another scrape() here.
        if self._running:
            logger.info("Scraping already in progress, skipping...")
            return self.cache.snapshot

        self._running = True
        logger.info("Starting scrape operation...")
        try:
            try:
                raw_departures = await self._capture_departures()
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error(f"Scraping error: {message}", exc_info=True)
                self.cache.replace(self.cache.snapshot.failed(message, self.clock()))
            else:
                self._commit(raw_departures)
        finally:
            self._running = False

        return self.cache.snapshot

    def _commit(self, raw_departures: list[Any] | None) -> None:
        now = self.clock()
        if not raw_departures:
            logger.warning("No departure data captured, keeping previous departures")
            self.cache.replace(self.cache.snapshot.without_data(now))
            return

        departures = classify_departures(
            raw_departures,
            northbound_keywords=self.config.northbound_keywords,
            southbound_keywords=self.config.southbound_keywords,
            limit=self.config.departures_per_direction,
        )
        self.cache.replace(self.cache.snapshot.succeeded(departures, now))
        logger.info(
            f"Scrape completed successfully. Found {len(departures.northbound)} northbound "
            f"and {len(departures.southbound)} southbound trains"
        )

    async def _capture_departures(self) -> list[Any] | None:
        page = await self.session.acquire()
        interceptor = self.interceptor_factory()
        interceptor.attach(page)
        try:
            logger.info(f"Navigating to {self.config.source_url}")
            await page.goto(
                self.config.source_url,
                wait_until="networkidle",
                timeout=self.config.navigation_timeout_seconds * 1000,
            )
            await self.navigator.drive_to_submission(page)
        finally:
            await self.session.release(page)
        return interceptor.captured

    async def start_scheduled_scraping(self, initial_delay: float | None = None) -> None:
        """Start scraping now (after ``initial_delay``) and then periodically."""
        if self.is_scheduled:
            logger.warning("Scheduled scraping already running")
            return

        delay = self.config.initial_scrape_delay_seconds if initial_delay is None else initial_delay
        logger.info(
            f"Starting scheduled scraping every {self.config.scrape_interval_minutes} minutes"
        )
        self._task = asyncio.create_task(self._schedule_loop(delay))

    async def stop_scheduled_scraping(self) -> None:
        """Stop the periodic scrape task."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Scheduled scraping cancelled")
            logger.info("Stopped scheduled scraping")
        self._task = None

    async def _scrape_with_error_handling(self) -> None:
        try:
            snapshot = await self.scrape()
            logger.info(f"Scheduled scrape completed with status {snapshot.status.value}")
        except Exception as e:
            # Keep the schedule alive whatever happens
            logger.error(f"Scheduled scrape failed (will retry): {e}", exc_info=True)

    async def _schedule_loop(self, initial_delay: float) -> None:
        interval_seconds = self.config.scrape_interval_minutes * 60
        try:
            if initial_delay > 0:
                await asyncio.sleep(initial_delay)
            await self._scrape_with_error_handling()
            while True:
                await asyncio.sleep(interval_seconds)
                logger.info("Running scheduled scrape...")
                await self._scrape_with_error_handling()
        except asyncio.CancelledError:
            logger.info("Scheduled scraping cancelled")
            raise
