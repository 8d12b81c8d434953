"""Protocol for driving the source page to the data-fetch call."""

from typing import Any, Protocol

from hblr_departures.domain.models.navigation_report import NavigationReport


class PageNavigatorProtocol(Protocol):
    """Brings a loaded page into the state where departures are requested."""

    async def drive_to_submission(self, page: Any) -> NavigationReport:
        """Run every interaction step; never raises for a missing element."""
        ...
