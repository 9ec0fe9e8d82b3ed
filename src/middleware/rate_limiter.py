"""In-memory sliding window rate limiter keyed by session (or client address)."""

import hashlib
import time
from collections import defaultdict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.config.settings import get_settings

# Paths that use the stricter AI generation limit
AI_PATHS = {"/api/chat"}
EXEMPT_PATHS = {"/health", "/api/health", "/docs", "/redoc", "/openapi.json"}


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        # client key -> list of request timestamps
        self._standard_windows: dict[str, list[float]] = defaultdict(list)
        self._ai_windows: dict[str, list[float]] = defaultdict(list)
        self._last_sweep = 0.0

    def _client_key(self, request: Request) -> str:
        settings = get_settings()
        cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
        if cookie:
            return "s:" + hashlib.sha256(cookie.encode()).hexdigest()
        host = request.client.host if request.client else "unknown"
        return "ip:" + host

    def _check_limit(self, window: list[float], limit: int, now: float) -> tuple[bool, int]:
        """Remove expired entries, check if under limit. Returns (allowed, retry_after_seconds)."""
        cutoff = now - 60.0
        while window and window[0] < cutoff:
            window.pop(0)

        if len(window) >= limit:
            retry_after = int(window[0] - cutoff) + 1
            return False, retry_after

        window.append(now)
        return True, 0

    def _sweep(self, now: float) -> None:
        """Drop clients whose windows hold no timestamps from the last minute."""
        cutoff = now - 60.0
        for windows in (self._standard_windows, self._ai_windows):
            stale = [key for key, window in windows.items() if not window or window[-1] < cutoff]
            for key in stale:
                del windows[key]
        self._last_sweep = now

    def _reject(self, message: str, retry_after: int) -> Response:
        return JSONResponse(
            status_code=429,
            content={"status": "error", "error": {"type": "rate_limit", "message": message}},
            headers={"Retry-After": str(retry_after)},
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path.rstrip("/") or "/"
        if path in EXEMPT_PATHS or not path.startswith("/api"):
            return await call_next(request)

        settings = get_settings()
        key = self._client_key(request)
        now = time.time()
        if now - self._last_sweep >= 60.0:
            self._sweep(now)

        if path in AI_PATHS and request.method == "POST":
            allowed, retry_after = self._check_limit(self._ai_windows[key], settings.RATE_LIMIT_AI, now)
            if not allowed:
                return self._reject("AI generation rate limit exceeded", retry_after)

        allowed, retry_after = self._check_limit(self._standard_windows[key], settings.RATE_LIMIT_STANDARD, now)
        if not allowed:
            return self._reject("Rate limit exceeded", retry_after)

        return await call_next(request)
