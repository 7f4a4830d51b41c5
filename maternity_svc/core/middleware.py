"""
Request logging middleware.

Each request is tagged with an id (the caller's X-Request-ID if it sent one,
otherwise a fresh short id). The id is bound to the logging context for the
lifetime of the request and echoed back in the X-Request-ID response header.
"""
import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from maternity_svc.core.logging_config import bind_request_id, reset_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


def _request_id_for(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH:
        return supplied
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every API request with its outcome and latency."""

    # Probes and docs are polled constantly; they are served but not logged.
    QUIET_PATHS = frozenset({"/health", "/ready", "/docs", "/redoc", "/openapi.json"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id_for(request)
        token = bind_request_id(request_id)
        path = request.url.path
        quiet = path in self.QUIET_PATHS
        started = time.perf_counter()

        try:
            if not quiet:
                logger.info(
                    f"{request.method} {path}",
                    extra={"query": str(request.query_params) or None}
                )
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(f"{request.method} {path} raised")
                raise

            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            if not quiet:
                logger.log(
                    logging.WARNING if response.status_code >= 400 else logging.INFO,
                    f"{request.method} {path} -> {response.status_code}",
                    extra={"status_code": response.status_code, "duration_ms": elapsed_ms}
                )
        finally:
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
