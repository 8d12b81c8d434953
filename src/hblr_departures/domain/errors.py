"""Domain errors."""


class BrowserLaunchError(RuntimeError):
    """The headless browser could not be started.

    Without a browser the service has no data source, so this is fatal.
    """


class SessionNotStartedError(RuntimeError):
    """A page was requested before the browser session was started."""
