"""
Request logging and rate limiting middleware
"""

import logging
import time
from collections import defaultdict, deque
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

EXEMPT_PATHS = (
    "/",
    "/docs",
    "/openapi.json",
    "/api/v1/",
    "/api/v1/health",
    "/api/v1/stats",
    "/api/v1/info",
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window, per-client-IP rate limiting kept in process memory"""

    def __init__(
        self,
        app,
        calls: int = 600,
        period: int = 60,
        exempt_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.calls = calls
        self.period = period
        self.exempt_paths = frozenset(exempt_paths or EXEMPT_PATHS)
        self.clients = defaultdict(deque)
        self._last_sweep = time.monotonic()

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = request.client.host if request.client is not None else "unknown"
        now = time.monotonic()
        if now - self._last_sweep >= self.period:
            self.sweep(now)
        window = self.clients[client_ip]

        while window and window[0] <= now - self.period:
            window.popleft()

        if len(window) >= self.calls:
            logger.warning("Rate limit exceeded for IP: %s", client_ip)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "RATE_LIMIT_EXCEEDED",
                    "message": f"Maximum {self.calls} requests per {self.period} seconds",
                },
            )

        window.append(now)
        return await call_next(request)

    def sweep(self, now: float) -> None:
        """Forget clients whose whole window has expired"""
        cutoff = now - self.period
        stale = [ip for ip, window in self.clients.items() if not window or window[-1] <= cutoff]
        for ip in stale:
            del self.clients[ip]
        self._last_sweep = now
        if stale:
            logger.debug("Dropped %d idle rate limit windows", len(stale))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with status and duration; expose the duration as a header"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client_host = request.client.host if request.client is not None else "unknown"
        logger.info(
            "Request: %s %s from %s", request.method, request.url.path, client_host
        )

        response = await call_next(request)

        process_ms = (time.perf_counter() - start_time) * 1000.0
        response.headers["X-Process-Time-Ms"] = f"{process_ms:.3f}"
        logger.info(
            "Response: %d for %s in %.3fms",
            response.status_code,
            request.url.path,
            process_ms,
        )
        return response
