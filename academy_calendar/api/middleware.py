"""
Request logging middleware.

Tags every request with an ID (the caller's X-Request-ID when it sends one)
and logs method, path, status and elapsed time under that ID.
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
ELAPSED_HEADER = "X-Elapsed-Ms"

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request and echoes its ID back to the caller.

    Calendar views fire one expand call per navigation, so the elapsed time
    is also returned in X-Elapsed-Ms for client-side tracing.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{req_id}] {route} failed after {_elapsed_ms(started):.1f}ms",
                extra={"request_id": req_id},
            )
            raise

        elapsed_ms = _elapsed_ms(started)
        logger.info(
            f"[{req_id}] {route} -> {response.status_code} ({elapsed_ms:.1f}ms)",
            extra={"request_id": req_id, "status_code": response.status_code},
        )

        response.headers[REQUEST_ID_HEADER] = req_id
        response.headers[ELAPSED_HEADER] = f"{elapsed_ms:.1f}"
        return response


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
