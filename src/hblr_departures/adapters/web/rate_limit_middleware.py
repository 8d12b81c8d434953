"""Per-client rate limiting of expensive endpoints using throttled-py."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

logger = logging.getLogger(__name__)


def extract_client_ip(request: Request) -> str:
    """Extract the client IP, preferring the first X-Forwarded-For entry."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limits how often each client may hit the guarded endpoints.

    Each manual scrape drives the browser for several seconds, so only the
    guarded (method, path) pairs are limited; cached reads are never throttled.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 6,
        guarded_routes: Iterable[tuple[str, str]] = (("POST", "/api/scrape"),),
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Requests allowed per client IP per minute on guarded routes.
            guarded_routes: (method, path) pairs to limit.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.guarded_routes = {(method.upper(), path) for method, path in guarded_routes}
        self.quota = rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
        self.rate_limiter_store = store.MemoryStore()
        logger.info(
            f"Rate limiting {sorted(self.guarded_routes)}: "
            f"{requests_per_minute} requests per minute per IP"
        )

    def is_guarded(self, request: Request) -> bool:
        return (request.method.upper(), request.url.path) in self.guarded_routes

    def _extract_retry_after(self, result: Any) -> float:
        state = getattr(result, "state", None)
        retry_after = getattr(state, "retry_after", None) if state is not None else None
        if retry_after is None:
            retry_after = getattr(result, "retry_after", None)
        return float(retry_after) if retry_after else 60.0

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Reject guarded requests over quota with 429."""
        if not self.is_guarded(request):
            return await call_next(request)

        client_ip = extract_client_ip(request)
        throttle = Throttled(
            key=f"{request.url.path}:{client_ip}",
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )
        result = throttle.limit()
        if result.limited:
            retry_after = self._extract_retry_after(result)
            logger.warning(
                f"Rate limit exceeded for IP {client_ip} on {request.url.path}, "
                f"retry after {retry_after} seconds"
            )
            return JSONResponse(
                {"error": "Rate limit exceeded", "message": "Please try again later."},
                status_code=429,
                headers={"Retry-After": str(max(int(retry_after), 1))},
            )

        return await call_next(request)
