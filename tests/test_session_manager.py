"""Tests for the shared browser session."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from hblr_departures.adapters.browser.session_manager import LAUNCH_ARGS, BrowserSessionManager
from hblr_departures.domain.errors import BrowserLaunchError, SessionNotStartedError

PATCH_TARGET = "hblr_departures.adapters.browser.session_manager.async_playwright"


def make_playwright() -> tuple[MagicMock, MagicMock, MagicMock, MagicMock]:
    """Build a Playwright mock chain: (async_playwright, playwright, browser, context)."""
    page = MagicMock()
    page.close = AsyncMock()
    context = MagicMock()
    context.close = AsyncMock()
    context.new_page = AsyncMock(return_value=page)
    page.context = context

    browser = MagicMock()
    browser.is_connected.return_value = True
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    entry = MagicMock()
    entry.return_value.start = AsyncMock(return_value=playwright)
    return entry, playwright, browser, context


@pytest.mark.asyncio
async def test_start_launches_chromium_with_container_flags() -> None:
    """Given a new session, when starting, then Chromium is launched headless with flags."""
    entry, playwright, _, _ = make_playwright()
    session = BrowserSessionManager(headless=True, user_agent="UA/1.0")

    with patch(PATCH_TARGET, entry):
        await session.start()

    playwright.chromium.launch.assert_awaited_once_with(headless=True, args=list(LAUNCH_ARGS))
    assert "--no-sandbox" in LAUNCH_ARGS
    assert session.is_started is True


@pytest.mark.asyncio
async def test_start_twice_launches_once() -> None:
    """Given a started session, when starting again, then nothing is relaunched."""
    entry, playwright, _, _ = make_playwright()
    session = BrowserSessionManager()

    with patch(PATCH_TARGET, entry):
        await session.start()
        await session.start()

    playwright.chromium.launch.assert_awaited_once()


@pytest.mark.asyncio
async def test_launch_failure_raises_and_stops_playwright() -> None:
    """Given Chromium fails to launch, when starting, then BrowserLaunchError is raised."""
    entry, playwright, _, _ = make_playwright()
    playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
    session = BrowserSessionManager()

    with patch(PATCH_TARGET, entry), pytest.raises(BrowserLaunchError, match="Executable"):
        await session.start()

    playwright.stop.assert_awaited_once()
    assert session.is_started is False


@pytest.mark.asyncio
async def test_acquire_before_start_raises() -> None:
    """Given a session that was never started, when acquiring, then it raises."""
    session = BrowserSessionManager()

    with pytest.raises(SessionNotStartedError):
        await session.acquire()


@pytest.mark.asyncio
async def test_acquire_opens_page_in_fresh_context_with_user_agent() -> None:
    """Given a started session, when acquiring, then each page gets its own context."""
    entry, _, browser, context = make_playwright()
    session = BrowserSessionManager(user_agent="UA/1.0")

    with patch(PATCH_TARGET, entry):
        await session.start()
        page = await session.acquire()
        await session.acquire()

    assert page is context.new_page.return_value
    assert browser.new_context.await_count == 2
    browser.new_context.assert_awaited_with(user_agent="UA/1.0")


@pytest.mark.asyncio
async def test_acquire_closes_context_when_page_cannot_open() -> None:
    """Given a context that fails to open a page, when acquiring, then the context is closed."""
    entry, _, _, context = make_playwright()
    context.new_page.side_effect = PlaywrightError("Target closed")
    session = BrowserSessionManager()

    with patch(PATCH_TARGET, entry):
        await session.start()
        with pytest.raises(PlaywrightError):
            await session.acquire()

    context.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_release_closes_page_and_context() -> None:
    """Given an acquired page, when releasing, then page and context are closed."""
    entry, _, _, context = make_playwright()
    session = BrowserSessionManager()

    with patch(PATCH_TARGET, entry):
        await session.start()
        page = await session.acquire()
        await session.release(page)

    page.close.assert_awaited_once()
    context.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_release_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    """Given a page that fails to close, when releasing, then no error escapes."""
    page = MagicMock()
    page.close = AsyncMock(side_effect=PlaywrightError("Target closed"))
    session = BrowserSessionManager()

    await session.release(page)

    assert "Failed to close page cleanly" in caplog.text


@pytest.mark.asyncio
async def test_shutdown_closes_browser_and_stops_playwright() -> None:
    """Given a started session, when shutting down, then browser and driver stop."""
    entry, playwright, browser, _ = make_playwright()
    session = BrowserSessionManager()

    with patch(PATCH_TARGET, entry):
        await session.start()
        await session.shutdown()

    browser.close.assert_awaited_once()
    playwright.stop.assert_awaited_once()
    assert session.is_started is False


@pytest.mark.asyncio
async def test_shutdown_without_start_is_noop() -> None:
    """Given a session that never started, when shutting down, then nothing fails."""
    await BrowserSessionManager().shutdown()
