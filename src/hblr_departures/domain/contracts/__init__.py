"""Protocols describing the seams between the scrape pipeline's components."""

from hblr_departures.domain.contracts.browser_session import BrowserSessionProtocol
from hblr_departures.domain.contracts.page_navigator import PageNavigatorProtocol
from hblr_departures.domain.contracts.snapshot_store import SnapshotStoreProtocol

__all__ = [
    "BrowserSessionProtocol",
    "PageNavigatorProtocol",
    "SnapshotStoreProtocol",
]
