"""Cache adapters."""

from hblr_departures.adapters.cache.snapshot_cache import SnapshotCache

__all__ = ["SnapshotCache"]
