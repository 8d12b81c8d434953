"""Shared snapshot cache implementation."""

from __future__ import annotations

import logging

from hblr_departures.domain.contracts.snapshot_store import SnapshotStoreProtocol
from hblr_departures.domain.models.scrape_snapshot import ScrapeSnapshot

logger = logging.getLogger(__name__)


class SnapshotCache(SnapshotStoreProtocol):
    """In-memory holder of the one scrape snapshot.

    Created at startup and handed to both the scrape coordinator (writer) and
    the HTTP handlers (readers). Snapshots are immutable, so replacing the
    reference is the whole update.
    """

    def __init__(self, initial: ScrapeSnapshot | None = None) -> None:
        self._snapshot = initial or ScrapeSnapshot()

    @property
    def snapshot(self) -> ScrapeSnapshot:
        return self._snapshot

    def replace(self, snapshot: ScrapeSnapshot) -> None:
        self._snapshot = snapshot
        logger.debug(
            f"Snapshot replaced: status={snapshot.status.value}, "
            f"northbound={len(snapshot.northbound)}, southbound={len(snapshot.southbound)}"
        )
