"""Per-client request throttling."""

import time
from collections import deque
from math import ceil

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.web.envelope import failure

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Allow at most ``limit`` requests per client IP within a sliding window."""

    def __init__(self, app, limit: int, window_seconds: float = 60.0, clock=time.monotonic):
        super().__init__(app)
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque] = {}
        self._last_sweep = clock()

    async def dispatch(self, request, call_next):
        client = request.client.host if request.client else "unknown"
        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        hits = self._hits.setdefault(client, deque())
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

        if len(hits) >= self.limit:
            retry_after = max(1, ceil(self.window_seconds - (now - hits[0])))
            return JSONResponse(
                status_code=429,
                content=failure(RATE_LIMIT_MESSAGE),
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        return await call_next(request)

    def _sweep(self, now: float) -> None:
        """Forget clients with no hits left inside the window."""
        stale = [client for client, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for client in stale:
            del self._hits[client]
        self._last_sweep = now
