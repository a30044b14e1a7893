"""
Request correlation and access logging.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ticketbari.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNLOGGED_PATHS = frozenset({"/health", "/metrics"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id (the caller's X-Request-ID when present) into the
    structlog context, echoes it on the response and logs one line per
    request. 5xx responses log at error level, 4xx at warning.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_crashed", duration_ms=_elapsed_ms(started))
            raise

        elapsed = _elapsed_ms(started)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed}ms"

        if request.url.path not in UNLOGGED_PATHS:
            status_code = response.status_code
            log = logger.error if status_code >= 500 else logger.warning if status_code >= 400 else logger.info
            log(
                "request_completed",
                status_code=status_code,
                duration_ms=elapsed,
                client=request.client.host if request.client else None,
            )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
