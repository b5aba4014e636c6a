"""
So Quoteable Backend — Rate Limiting Middleware
================================================

What:  Per-IP sliding window rate limiter.
How:   Each IP keeps a list of request timestamps. On each request the
       timestamps older than the window are dropped; if the remainder is at
       the limit the request is rejected with 429 and Retry-After.

Inactive IP sweep:
    Every admitted request re-arms a debounced sweep. Once the API has been
    quiet for RATE_LIMIT_SWEEP_DELAY_MS it runs once and drops IPs with no
    request inside the window. Under sustained traffic the timer never gets
    to fire, so the pending sweep is flushed inline whenever the last one is
    older than the rate limit window.

Single-process only: state lives in this worker's memory.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from quoteable.config import settings
from quoteable.lib.debounce import AsyncioScheduler, Debounced, debounce
from quoteable.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._last_sweep = time.time()
        # Timers run on the serving event loop, resolved when first armed
        self.sweep: Debounced = debounce(
            self._cleanup_inactive_ips,
            settings.rate_limit_sweep_delay_ms,
            scheduler=AsyncioScheduler(),
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - settings.rate_limit_window
        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= settings.rate_limit_requests:
            retry_after = int(timestamps[0] + settings.rate_limit_window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                settings.rate_limit_window,
            )
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Please wait {retry_after} seconds before retrying.",
                details={"retry_after": retry_after},
            )
            return JSONResponse(
                status_code=429,
                content=body.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)
        self.sweep()
        if now - self._last_sweep >= settings.rate_limit_window:
            self.sweep.flush()

        return await call_next(request)

    def _cleanup_inactive_ips(self, now: Optional[float] = None) -> int:
        """Drop IPs without a request inside the current window. Returns how many."""
        now = now or time.time()
        self._last_sweep = now
        window_start = now - settings.rate_limit_window
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Swept %d inactive IP entries", len(inactive_ips))
        return len(inactive_ips)
