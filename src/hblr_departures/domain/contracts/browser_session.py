"""Protocol for the shared browser session."""

from typing import Any, Protocol


class BrowserSessionProtocol(Protocol):
    """Owns the browser process and hands out one fresh page per scrape."""

    async def start(self) -> None:
        """Launch the browser. Raises BrowserLaunchError on failure."""
        ...

    async def acquire(self) -> Any:
        """Open a fresh page with its own cookies and storage."""
        ...

    async def release(self, page: Any) -> None:
        """Close a page previously returned by acquire()."""
        ...

    async def shutdown(self) -> None:
        """Close the browser and release all resources."""
        ...
