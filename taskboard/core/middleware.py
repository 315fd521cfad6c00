"""HTTP middleware for the Taskboard API: request logging, security headers
and per-client rate limiting."""

import time
import uuid
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .exceptions import RateLimitError, UnexpectedError
from .logging import get_logger

RATE_LIMIT_EXEMPT_PATHS = frozenset({"/health", "/ready"})

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "script-src 'self'; "
    "img-src 'self' data: https:"
)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and tags the response with ``X-Request-ID``.

    Exceptions the routes leave unhandled become a generic 500 here, inside
    the CORS and security header layers, so error responses carry the same
    headers as any other.
    """

    def __init__(self, app, logger=None, add_request_id_header: bool = True):
        super().__init__(app)
        self.logger = logger or get_logger("taskboard.http")
        self.add_request_id_header = add_request_id_header

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error("unhandled_exception", path=request.url.path, request_id=request_id, exc_info=e)
            error = UnexpectedError()
            response = JSONResponse(status_code=error.status_code, content={"error": error.message})

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        self.logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            client=_client_host(request),
            request_id=request_id,
        )
        if self.add_request_id_header:
            response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        return response


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    Thread-safe in-memory tracker. Expired windows are dropped lazily.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = Lock()

    def hit(self, key: str) -> bool:
        """Count one request for ``key``. Returns False once the window is exhausted."""
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                if len(self._windows) > 10_000:
                    self._prune(now)
                window = _Window(count=0, reset_at=now + self.window_seconds)
                self._windows[key] = window
            window.count += 1
            return window.count <= self.max_requests

    def retry_after(self, key: str) -> int:
        """Seconds until ``key``'s window resets (0 when not limited)."""
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return 0
            return max(0, int(window.reset_at - self._clock()))

    def _prune(self, now: float) -> None:
        for key in [k for k, w in self._windows.items() if now >= w.reset_at]:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients that exceed the configured request budget with a 429."""

    def __init__(
        self,
        app,
        limiter: RateLimiter,
        exempt_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.limiter = limiter
        self.exempt_paths = frozenset(exempt_paths) if exempt_paths is not None else RATE_LIMIT_EXEMPT_PATHS

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.limiter.max_requests <= 0 or request.method == "OPTIONS":
            return await call_next(request)
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        key = _client_host(request)
        if not self.limiter.hit(key):
            error = RateLimitError()
            return JSONResponse(
                status_code=error.status_code,
                content={"error": error.message},
                headers={"Retry-After": str(self.limiter.retry_after(key))},
            )

        return await call_next(request)
