"""Protocol for the shared snapshot cache."""

from typing import Protocol

from hblr_departures.domain.models.scrape_snapshot import ScrapeSnapshot


class SnapshotStoreProtocol(Protocol):
    """Holds the one process-wide scrape snapshot."""

    @property
    def snapshot(self) -> ScrapeSnapshot:
        """The current snapshot."""
        ...

    def replace(self, snapshot: ScrapeSnapshot) -> None:
        """Swap in a new snapshot."""
        ...
