"""
Request logging middleware.

Assigns a short request id to every request and logs method, path, status
and duration so proxy hops can be correlated in the logs.
"""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("smartlens.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.time()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.time() - started) * 1000
            logger.exception(
                "[request %s] %s %s -> 500 (%.1f ms)",
                request_id, request.method, request.url.path, duration_ms
            )
            raise
        duration_ms = (time.time() - started) * 1000
        logger.info(
            "[request %s] %s %s -> %d (%.1f ms)",
            request_id, request.method, request.url.path, response.status_code, duration_ms
        )
        response.headers["X-Request-ID"] = request_id
        return response
