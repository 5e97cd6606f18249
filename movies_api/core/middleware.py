import time
import uuid
import logging
from collections.abc import Callable
from http import HTTPStatus

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from movies_api.core.trace import TRACE_HEADER, set_trace_id

alog = logging.getLogger("access")
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; script-src 'self'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

RATE_LIMIT_MESSAGE = "Too many requests. Please slow down."


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        set_trace_id(trace_id)
        start = time.perf_counter()
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[TRACE_HEADER] = trace_id
            return response
        finally:
            dur_ms = int((time.perf_counter() - start) * 1000)
            alog.info(
                "access",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "query": str(request.url.query)
                    if request.url.query else "",
                    "status": int(status),
                    "latency_ms": dur_ms,
                    "client_ip": client_ip(request),
                },
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window limiter keyed by client address.

    State is per-process: with several workers each one counts separately.
    """

    def __init__(
        self,
        app,
        max_requests: int,
        window_s: int,
        exempt_paths: tuple[str, ...] = ("/health",),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_s = window_s
        self.exempt_paths = exempt_paths
        self.clock = clock
        # ip -> (начало окна, число запросов в окне)
        self._hits: dict[str, tuple[float, int]] = {}

    def _hit(self, key: str) -> tuple[bool, int]:
        """Register a request; return (allowed, seconds until reset)."""
        now = self.clock()
        window_start, count = self._hits.get(key, (now, 0))
        if now - window_start >= self.window_s:
            window_start, count = now, 0
            self._evict(now)
        count += 1
        self._hits[key] = (window_start, count)
        retry_after = max(int(window_start + self.window_s - now), 1)
        return count <= self.max_requests, retry_after

    def _evict(self, now: float) -> None:
        expired = [ip for ip, (start, _) in self._hits.items()
                   if now - start >= self.window_s]
        for ip in expired:
            del self._hits[ip]

    async def dispatch(self, request: Request, call_next):
        if self.max_requests <= 0 or request.url.path in self.exempt_paths:
            return await call_next(request)

        ip = client_ip(request)
        allowed, retry_after = self._hit(ip)
        if not allowed:
            logger.warning("rate_limited", extra={"client_ip": ip})
            return JSONResponse(
                {"error": RATE_LIMIT_MESSAGE},
                status_code=HTTPStatus.TOO_MANY_REQUESTS,
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
