"""Headless browser adapters: session, page interaction and response capture."""

from hblr_departures.adapters.browser.page_navigator import NavigatorTimings, PageNavigator
from hblr_departures.adapters.browser.page_profile import SourcePageProfile
from hblr_departures.adapters.browser.response_interceptor import (
    ResponseInterceptor,
    find_departures,
)
from hblr_departures.adapters.browser.session_manager import BrowserSessionManager

__all__ = [
    "BrowserSessionManager",
    "NavigatorTimings",
    "PageNavigator",
    "ResponseInterceptor",
    "SourcePageProfile",
    "find_departures",
]
