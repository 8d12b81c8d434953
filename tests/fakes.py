"""Test doubles for Playwright pages, responses and the browser session."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock


class FakeResponse:
    """A network response as seen by page.on("response", ...)."""

    def __init__(self, url: str, method: str = "POST", body: Any = None) -> None:
        self.url = url
        self.request = SimpleNamespace(url=url, method=method, post_data=None)
        self._body = body
        self.json_calls = 0

    async def json(self) -> Any:
        self.json_calls += 1
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakePage:
    """A page whose in-page scripts return canned results.

    ``script_results`` maps a script to its result: a plain value, an
    exception to raise, or a callable receiving the script argument.
    Responses are delivered to subscribed handlers when goto() is awaited.
    """

    def __init__(
        self,
        script_results: dict[str, Any] | None = None,
        responses: list[FakeResponse] | None = None,
        goto_error: Exception | None = None,
    ) -> None:
        self.script_results = dict(script_results or {})
        self.responses = list(responses or [])
        self.goto_error = goto_error
        self.evaluated: list[tuple[str, Any]] = []
        self.handlers: dict[str, list[Callable[[Any], Any]]] = {}
        self.goto_calls: list[tuple[str, dict[str, Any]]] = []
        self.wait_for_selector = AsyncMock()

    def on(self, event: str, handler: Callable[[Any], Any]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def scripts_run(self, script: str) -> list[Any]:
        """Arguments of every evaluation of ``script``."""
        return [arg for evaluated, arg in self.evaluated if evaluated == script]

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.evaluated.append((script, arg))
        result = self.script_results.get(script)
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(arg)
        return result

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.goto_calls.append((url, kwargs))
        if self.goto_error is not None:
            raise self.goto_error
        for response in self.responses:
            for handler in self.handlers.get("response", []):
                await handler(response)


class FakeSession:
    """Browser session handing out one prepared page.

    When ``gate`` is set, acquire() waits on it, which keeps a scrape in
    flight until the test releases it.
    """

    def __init__(self, page: FakePage | None = None, acquire_error: Exception | None = None) -> None:
        self.page = page or FakePage()
        self.acquire_error = acquire_error
        self.gate: asyncio.Event | None = None
        self.acquired = 0
        self.released: list[Any] = []

    async def start(self) -> None:
        return None

    async def acquire(self) -> FakePage:
        self.acquired += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.acquire_error is not None:
            raise self.acquire_error
        return self.page

    async def release(self, page: Any) -> None:
        self.released.append(page)

    async def shutdown(self) -> None:
        return None


def graphql_response(departures: list[dict[str, Any]], field: str = "getBusDV5") -> FakeResponse:
    return FakeResponse(
        "https://www.njtransit.com/api/graphql",
        body={"data": {field: departures}},
    )


def raw_departure(header: str, time: str = "11:27 PM") -> dict[str, Any]:
    return {
        "header": header,
        "departuretime": time,
        "departurestatus": "in 7 mins",
        "schedDepTime": f"8/2/2025 {time[:-3]}:00 {time[-2:]}",
    }
