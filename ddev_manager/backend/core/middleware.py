"""
HTTP Middleware.

Request context tracking, security response headers, API rate limiting
and the database upload size gate.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ddev_manager.backend.core.exception_handlers import build_error_response
from ddev_manager.backend.core.logging import get_logger
from ddev_manager.backend.security.rate_limiter import ApiRateLimiter

logger = get_logger(__name__)

# X-Frontend-ID values kept as-is; anything else is logged as "unknown"
KNOWN_FRONTENDS = {"web", "cli", "api", "internal"}

# Requests that run ddev operations are logged at info, reads at debug
_MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Correlates logs and responses for one request.

    Reuses the caller's X-Request-ID or makes one, records which client
    sent the request (X-Frontend-ID: the web dashboard, the terminal
    client, scripts), binds both to the structlog context and stamps
    X-Request-ID and X-Response-Time on the response. The values are also
    left on ``request.state`` for handlers and the error envelope.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
        if frontend not in KNOWN_FRONTENDS:
            frontend = "unknown"

        request.state.request_id = request_id
        request.state.frontend = frontend
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # The registered exception handlers render the envelope
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            log = logger.info if request.method in _MUTATING_METHODS else logger.debug
            log(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security response headers from security.yaml.

    Sets X-Content-Type-Options, X-Frame-Options and Referrer-Policy on
    every response, plus Strict-Transport-Security when HSTS is enabled.
    Headers already set by an endpoint are left alone.
    """

    def __init__(self, app: ASGIApp, headers: dict[str, str] | None = None) -> None:
        super().__init__(app)
        if headers is None:
            headers = self._headers_from_config()
        self.security_headers = headers

    @staticmethod
    def _headers_from_config() -> dict[str, str]:
        from ddev_manager.backend.core.config import get_app_config
        conf = get_app_config().security.headers
        headers = {
            "X-Content-Type-Options": conf.x_content_type_options,
            "X-Frame-Options": conf.x_frame_options,
            "Referrer-Policy": conf.referrer_policy,
        }
        if conf.hsts_enabled:
            headers["Strict-Transport-Security"] = f"max-age={conf.hsts_max_age}; includeSubDomains"
        return headers

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        for name, value in self.security_headers.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client rate limiting for paths under ``/api/``.

    Requests over the limit get a 429 error envelope with Retry-After;
    the endpoint is not called.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: ApiRateLimiter | None = None,
        path_prefix: str = "/api/",
    ) -> None:
        super().__init__(app)
        self.limiter = limiter or ApiRateLimiter.from_config()
        self.path_prefix = path_prefix

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_key = request.client.host if request.client else "unknown"
        result = self.limiter.check(client_key)
        if not result.allowed:
            return build_error_response(
                429,
                "RATE_LIMITED",
                "Too many requests from this IP, please try again later.",
                request_id=getattr(request.state, "request_id", None),
                headers={"Retry-After": str(result.retry_after_seconds)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response


# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class UploadLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects database uploads whose declared Content-Length is over the cap.

    Runs before FastAPI parses the multipart form, so an oversized dump is
    turned away without being received. Bodies without a Content-Length
    are still capped by ``spool_upload`` while it copies the file.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_bytes: int | None = None,
        path_suffix: str = "/database/import",
    ) -> None:
        super().__init__(app)
        if max_bytes is None:
            from ddev_manager.backend.core.config import get_app_config
            max_bytes = get_app_config().ddev.max_upload_bytes
        self.max_bytes = max_bytes
        self.path_suffix = path_suffix

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method != "POST" or not request.url.path.endswith(self.path_suffix):
            return await call_next(request)

        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_bytes + MULTIPART_OVERHEAD_BYTES:
            logger.warning(
                "Rejected oversized database upload",
                extra={"content_length": int(declared), "max_bytes": self.max_bytes},
            )
            return build_error_response(
                400,
                "UPLOAD_REJECTED",
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB.",
                request_id=getattr(request.state, "request_id", None),
            )

        return await call_next(request)
