import asyncio
import logging
import time
from collections import deque
from typing import Callable, Iterable
from fastapi import Request
from fastapi.responses import JSONResponse
from jose import jwt, JWTError

logger = logging.getLogger(__name__)


class RateLimitMiddleware:
    """Sliding-window limit per caller on the routes that end in a provider call.

    ``include_routes`` holds ``(method, path_prefix)`` pairs; other requests
    pass through untouched.
    """

    def __init__(
        self,
        app,
        *,
        window_seconds: int,
        max_calls: int,
        key_func: Callable[[Request], str],
        include_routes: Iterable[tuple[str, str]] = (("POST", "/api/generate-summary"),),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.app = app
        self.window = window_seconds
        self.max_calls = max_calls
        self.key_func = key_func
        self.routes = tuple((method.upper(), prefix) for method, prefix in include_routes)
        self.clock = clock

        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    def _guarded(self, scope) -> bool:
        method, path = scope.get("method"), scope.get("path", "")
        return any(method == m and path.startswith(p) for m, p in self.routes)

    def _sweep(self, now: float) -> None:
        """Forget callers whose newest hit has left the window."""
        cutoff = now - self.window
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]
        self._last_sweep = now

    async def _acquire(self, key: str) -> int | None:
        """Record a hit for ``key``; return seconds to wait when the window is full."""
        now = self.clock()
        async with self._lock:
            if now - self._last_sweep >= self.window:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self.window:
                hits.popleft()
            if len(hits) >= self.max_calls:
                return max(1, int(hits[0] + self.window - now))
            hits.append(now)
        return None

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not self._guarded(scope):
            return await self.app(scope, receive, send)

        key = self.key_func(Request(scope, receive=receive))
        retry_after = await self._acquire(key)
        if retry_after is None:
            return await self.app(scope, receive, send)

        logger.warning("Rate limit reached for %s on %s", key, scope.get("path"))
        resp = JSONResponse(
            status_code=429,
            content={"detail": f"Too many summary requests, try again in {retry_after}s"},
            headers={"Retry-After": str(retry_after)},
        )
        return await resp(scope, receive, send)


def make_key_func(secret_key: str | None) -> Callable[[Request], str]:
    """Key on the token subject when a valid bearer token is sent, else on client IP."""
    def _key(req: Request) -> str:
        auth = req.headers.get("authorization", "")
        if secret_key and auth.lower().startswith("bearer "):
            try:
                sub = jwt.decode(auth.split(" ", 1)[1].strip(), secret_key, algorithms=["HS256"]).get("sub")
            except JWTError:
                sub = None
            if sub:
                return f"user:{sub}"
        return f"ip:{req.client.host if req.client else 'unknown'}"
    return _key
