"""Drives the DepartureVision page until it requests departure data.

The page needs a tab switch, two form fields and a button click before it
fires the data-fetch call. Every step is tolerant: when its element is missing
the step is logged and the next one runs anyway. Whether the scrape produced
data is decided by the response interceptor, not here.

Steps: loaded -> tab_selected -> form_populated -> submitted -> settled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Error as PlaywrightError

from hblr_departures.adapters.browser.page_profile import SourcePageProfile
from hblr_departures.adapters.browser.page_scripts import (
    CLICK_SUBMIT_SCRIPT,
    DIAGNOSTICS_SCRIPT,
    FILL_FIELD_SCRIPT,
    FORCE_ACTIVATE_TAB_SCRIPT,
    SELECT_TAB_SCRIPT,
    TAB_STATE_SCRIPT,
)
from hblr_departures.domain.contracts.page_navigator import PageNavigatorProtocol
from hblr_departures.domain.models.navigation_report import NavigationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigatorTimings:
    """Bounded waits between interaction steps, in seconds unless noted."""

    body_timeout_ms: int = 10_000
    after_load: float = 1.0
    after_tab_click: float = 1.0
    after_forced_tab: float = 0.5
    after_line_fill: float = 1.0
    after_origin_fill: float = 0.5
    after_submit: float = 2.0

    @classmethod
    def immediate(cls) -> NavigatorTimings:
        """Timings without any waits."""
        return cls(
            body_timeout_ms=1_000,
            after_load=0,
            after_tab_click=0,
            after_forced_tab=0,
            after_line_fill=0,
            after_origin_fill=0,
            after_submit=0,
        )


async def _safe_evaluate(page: Any, script: str, arg: dict[str, Any]) -> Any:
    """Run an in-page script, returning None if the page rejects it."""
    try:
        return await page.evaluate(script, arg)
    except PlaywrightError as e:
        logger.warning(f"Page script failed: {e}")
        return None


class PageNavigator(PageNavigatorProtocol):
    """Runs the interaction sequence on a freshly loaded source page."""

    def __init__(
        self,
        profile: SourcePageProfile | None = None,
        timings: NavigatorTimings | None = None,
    ) -> None:
        self.profile = profile or SourcePageProfile()
        self.timings = timings or NavigatorTimings()

    async def drive_to_submission(self, page: Any) -> NavigationReport:
        """Run all steps in order and report which ones reached their target."""
        loaded = await self._wait_until_loaded(page)
        await self._record_transition(page, "loaded")

        tab_selected = await self._select_tab(page)
        await self._record_transition(page, "tab_selected")

        form_populated = await self._populate_form(page)
        await self._record_transition(page, "form_populated")

        submitted = await self._submit(page)
        await self._record_transition(page, "submitted")

        # Give the triggered data-fetch call time to complete
        await asyncio.sleep(self.timings.after_submit)

        report = NavigationReport(
            loaded=loaded,
            tab_selected=tab_selected,
            form_populated=form_populated,
            submitted=submitted,
        )
        logger.info(f"Page interaction settled: {report}")
        return report

    async def _wait_until_loaded(self, page: Any) -> bool:
        loaded = True
        try:
            await page.wait_for_selector("body", timeout=self.timings.body_timeout_ms)
        except PlaywrightError as e:
            logger.warning(f"Page body did not appear: {e}")
            loaded = False
        # Late content
        await asyncio.sleep(self.timings.after_load)
        return loaded

    def _tab_arg(self) -> dict[str, Any]:
        return {"tabId": self.profile.light_rail_tab_id, "railTabId": self.profile.rail_tab_id}

    async def _select_tab(self, page: Any) -> bool:
        strategy = await _safe_evaluate(
            page,
            SELECT_TAB_SCRIPT,
            {
                "tabId": self.profile.light_rail_tab_id,
                "tabLabel": self.profile.tab_label,
                "tabIdMarker": self.profile.tab_id_marker,
            },
        )
        if not strategy:
            logger.warning("Could not find the light rail tab")
            return False

        logger.info(f"Clicked light rail tab (found by {strategy})")
        await asyncio.sleep(self.timings.after_tab_click)

        state = await _safe_evaluate(page, TAB_STATE_SCRIPT, self._tab_arg())
        if isinstance(state, dict) and state.get("lightRailTabActive"):
            return True

        logger.info("Light rail tab not active after click, activating programmatically")
        forced = await _safe_evaluate(page, FORCE_ACTIVATE_TAB_SCRIPT, self._tab_arg())
        if not forced:
            logger.warning("Programmatic tab activation failed")
            return False
        await asyncio.sleep(self.timings.after_forced_tab)
        return True

    async def _fill_field(self, page: Any, field_id: str, value: str, force: bool) -> bool:
        filled = await _safe_evaluate(
            page,
            FILL_FIELD_SCRIPT,
            {"fieldId": field_id, "value": value, "forceEnable": force},
        )
        return bool(filled)

    async def _populate_form(self, page: Any) -> bool:
        line_filled = await self._fill_field(
            page, self.profile.line_field_id, self.profile.line_value, force=False
        )
        if not line_filled:
            logger.warning("Line field not found or disabled, skipping origin field")
            return False

        # The origin field is enabled by the line field's change handlers
        await asyncio.sleep(self.timings.after_line_fill)
        # Force-enabling covers the case where those handlers did not run
        origin_filled = await self._fill_field(
            page, self.profile.origin_field_id, self.profile.origin_value, force=True
        )
        if not origin_filled:
            logger.warning("Origin field not found")

        await asyncio.sleep(self.timings.after_origin_fill)
        logger.info(f"Form filled: line={line_filled}, origin={origin_filled}")
        return origin_filled

    async def _submit(self, page: Any) -> bool:
        match = await _safe_evaluate(
            page,
            CLICK_SUBMIT_SCRIPT,
            {
                "label": self.profile.submit_label,
                "fallbackLabel": self.profile.fallback_submit_label,
            },
        )
        if not match:
            logger.warning("No enabled departures button found")
            return False
        logger.info(f"Clicked departures button ({match} match)")
        return True

    async def _record_transition(self, page: Any, state: str) -> None:
        """Log a diagnostic snapshot of the form. Failures here are ignored."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        try:
            snapshot = await page.evaluate(
                DIAGNOSTICS_SCRIPT,
                {
                    "tabId": self.profile.light_rail_tab_id,
                    "railTabId": self.profile.rail_tab_id,
                    "lineFieldId": self.profile.line_field_id,
                    "originFieldId": self.profile.origin_field_id,
                    "label": self.profile.submit_label,
                },
            )
            logger.debug(f"[{state}] {snapshot}")
        except Exception as e:
            logger.debug(f"[{state}] diagnostics unavailable: {e}")
