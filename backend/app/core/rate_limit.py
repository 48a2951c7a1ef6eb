"""
Rate Limiting Middleware
Fixed-window, per-client-IP limiting for everything under /api
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable, Dict, Tuple
import threading
import logging
import math
import time

from app.core.config import settings

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    Thread-safe in-memory rate limiter using a fixed window per key.

    Each key gets a window that starts with its first request; once
    ``max_requests`` have been seen the key is refused until the window ends.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> Tuple[bool, Dict]:
        """
        Record a request for ``key``.

        Returns:
            Tuple of (is_allowed, rate_limit_info)
        """
        now = self._clock()
        with self._lock:
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0

            reset = max(0, math.ceil(start + self.window_seconds - now))

            if count >= self.max_requests:
                return False, {
                    'limit': self.max_requests,
                    'remaining': 0,
                    'reset': reset,
                    'retry_after': max(1, reset),
                }

            count += 1
            self._windows[key] = (start, count)
            return True, {
                'limit': self.max_requests,
                'remaining': self.max_requests - count,
                'reset': reset,
            }

    def reset(self):
        with self._lock:
            self._windows.clear()


def get_client_ip(request: Request) -> str:
    """Get client IP address from request"""
    # Check for forwarded headers (when behind proxy)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware for rate limiting"""

    def __init__(self, app, limiter: FixedWindowRateLimiter = None):
        super().__init__(app)
        self.rate_limiter = limiter or FixedWindowRateLimiter(
            settings.RATE_LIMIT_MAX_REQUESTS, settings.rate_limit_window_seconds
        )

    async def dispatch(self, request: Request, call_next):
        # Only API routes are limited
        if not settings.RATE_LIMIT_ENABLED or not request.url.path.startswith('/api/'):
            return await call_next(request)

        client_ip = get_client_ip(request)
        is_allowed, rate_info = self.rate_limiter.hit(client_ip)

        if not is_allowed:
            logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={'error': 'Too many requests from this IP, please try again later.'},
                headers={
                    'Retry-After': str(rate_info['retry_after']),
                    'X-RateLimit-Limit': str(rate_info['limit']),
                    'X-RateLimit-Remaining': '0',
                    'X-RateLimit-Reset': str(rate_info['reset'])
                }
            )

        response = await call_next(request)

        response.headers['X-RateLimit-Limit'] = str(rate_info['limit'])
        response.headers['X-RateLimit-Remaining'] = str(rate_info['remaining'])
        response.headers['X-RateLimit-Reset'] = str(rate_info['reset'])

        return response
