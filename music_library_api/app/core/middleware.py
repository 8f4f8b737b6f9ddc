"""
HTTP request logging.

Every request is logged twice: once when it arrives (method, path,
client address and user agent) and once when the response is ready
(status code and duration).  Unhandled exceptions are logged with the
duration before being re‑raised to the server.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        logger.info(
            "Incoming request method=%s path=%s remote_addr=%s user_agent=%s",
            request.method,
            request.url.path,
            client,
            request.headers.get("user-agent", ""),
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "Request failed method=%s path=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                duration_ms,
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Request completed method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
