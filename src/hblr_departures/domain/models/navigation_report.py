"""Navigation report domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NavigationReport:
    """Which steps of the page interaction reached their target.

    Informational only: a scrape succeeds or fails on whether a payload was
    captured, not on these flags.
    """

    loaded: bool = False
    tab_selected: bool = False
    form_populated: bool = False
    submitted: bool = False
