"""Captures departure data from the page's data-fetch responses.

The departure board is filled by a GraphQL call whose response shape changes
from time to time. The departure list is located with an ordered chain of
matchers; each takes the payload's ``data`` object and returns the departure
list or None. The first matcher that finds a non-empty list wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

PayloadMatcher = Callable[[Mapping[str, Any]], list[Any] | None]

# Attribute names that identify a departure record
DEPARTURE_ATTRIBUTES: tuple[str, ...] = ("departuretime", "header", "destination", "time")

# Fields known to carry departures, in priority order
KNOWN_DEPARTURE_FIELDS: tuple[str, ...] = (
    "getBusDV5",
    "getDepartures",
    "departures",
    "lightRailDV",
)

# Fields of payloads that never carry departures
STATUS_ONLY_FIELDS: tuple[str, ...] = ("getSystemStatus",)


def match_departure_shaped_field(data: Mapping[str, Any]) -> list[Any] | None:
    """Find the first top-level list whose first element looks like a departure."""
    for key, value in data.items():
        if not isinstance(value, list) or not value:
            continue
        first = value[0]
        if isinstance(first, Mapping) and any(first.get(attr) for attr in DEPARTURE_ATTRIBUTES):
            logger.info(f"Found departure data in '{key}' with {len(value)} entries")
            return value
    return None


def match_known_field(data: Mapping[str, Any]) -> list[Any] | None:
    """Take the first well-known departure field that holds a non-empty list."""
    for key in KNOWN_DEPARTURE_FIELDS:
        value = data.get(key)
        if isinstance(value, list) and value:
            logger.info(f"Found {key} with {len(value)} departures")
            return value
    return None


DEFAULT_MATCHERS: tuple[PayloadMatcher, ...] = (
    match_departure_shaped_field,
    match_known_field,
)


def is_status_only(data: Mapping[str, Any]) -> bool:
    return any(key in data for key in STATUS_ONLY_FIELDS)


def find_departures(
    payload: Any, matchers: Sequence[PayloadMatcher] = DEFAULT_MATCHERS
) -> list[Any] | None:
    """Locate the departure list inside a data-fetch response body.

    Args:
        payload: Decoded JSON body of the response.
        matchers: Matchers tried in order.

    Returns:
        The departure records, or None when the payload carries none.
    """
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if not isinstance(data, Mapping):
        return None

    for matcher in matchers:
        departures = matcher(data)
        if departures:
            return departures

    if is_status_only(data):
        logger.info("Found system status data (no departures)")
    else:
        logger.debug(f"No departure data in response with keys {sorted(data.keys())}")
    return None


class ResponseInterceptor:
    """Observes a page's responses and keeps the first departure payload found.

    One interceptor is created per scrape, so ``captured`` is scrape-scoped.
    """

    def __init__(
        self,
        url_marker: str = "graphql",
        method: str = "POST",
        matchers: Sequence[PayloadMatcher] = DEFAULT_MATCHERS,
    ) -> None:
        self.url_marker = url_marker
        self.method = method.upper()
        self.matchers = tuple(matchers)
        self.captured: list[Any] | None = None
        self.responses_inspected = 0

    def attach(self, page: Any) -> None:
        """Subscribe to the page's request and response events."""
        page.on("request", self.on_request)
        page.on("response", self.on_response)

    def is_data_fetch(self, url: str, method: str) -> bool:
        return self.url_marker in url and method.upper() == self.method

    async def on_request(self, request: Any) -> None:
        if self.is_data_fetch(request.url, request.method):
            logger.debug(f"Data-fetch request: {request.url} {request.post_data}")

    async def on_response(self, response: Any) -> None:
        """Inspect one response. Never raises."""
        try:
            if self.captured is not None:
                return
            if not self.is_data_fetch(response.url, response.request.method):
                return

            self.responses_inspected += 1
            logger.info(f"Intercepted data-fetch response: {response.url}")
            payload = await response.json()
            departures = find_departures(payload, self.matchers)
            if departures and self.captured is None:
                self.captured = departures
        except Exception as e:
            logger.warning(f"Error processing response: {e}")
