"""Per-client rate limiting for public API endpoints."""

import logging
import threading
import time

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def get_client_ip(request) -> str:
    """Extract client IP, respecting X-Forwarded-For behind a proxy."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


class RateLimiter:
    """Sliding-window request counter (per-process)."""

    def __init__(self, window: int = 60):
        self.window = window
        self._lock = threading.Lock()
        # {key: [timestamp, timestamp, ...]}
        self._hits: dict[str, list[float]] = {}
        self._last_sweep = time.monotonic()

    def allow(self, key: str, limit: int) -> bool:
        """Record a hit for ``key``; False once ``limit`` hits fall in the window."""
        now = time.monotonic()
        window_start = now - self.window
        with self._lock:
            if now - self._last_sweep >= self.window:
                self._sweep(window_start)
                self._last_sweep = now
            hits = [t for t in self._hits.get(key, []) if t > window_start]
            if len(hits) >= limit:
                self._hits[key] = hits
                return False
            hits.append(now)
            self._hits[key] = hits
        return True

    def _sweep(self, window_start: float) -> None:
        """Forget keys with no hits left in the window. Caller holds the lock."""
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug("Rate limiter dropped %d idle client(s)", len(idle))

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


class RateLimitMixin:
    """
    Mixin for class-based views that caps requests per client IP.

    ``rate_limit_setting`` names the Django setting holding the per-window
    limit; only methods in ``rate_limited_methods`` are counted.
    """

    rate_limiter: RateLimiter
    rate_limit_setting: str
    rate_limit_default = 10
    rate_limited_methods = ("post",)

    async def dispatch(self, request, *args, **kwargs):
        """Reject the request with 429 once the caller is over its limit."""
        if request.method.lower() in self.rate_limited_methods:
            limit = getattr(settings, self.rate_limit_setting, self.rate_limit_default)
            client_ip = get_client_ip(request)
            if not self.rate_limiter.allow(f"{self.rate_limit_setting}:{client_ip}", limit):
                logger.warning("Rate limit exceeded on %s for %s", request.path, client_ip)
                return JsonResponse(
                    {"error": "Too many requests. Try again later."},
                    status=429,
                )
        return await super().dispatch(request, *args, **kwargs)
