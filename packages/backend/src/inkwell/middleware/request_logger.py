"""Request logging middleware — one ID and two log lines per request.

Learn: Every request gets a UUID, either from the incoming
X-Request-ID header (for distributed tracing) or auto-generated.
The ID is bound to structlog's contextvars so it appears in every log
entry for that request (including auth.rejected and request.error),
and is returned in the response header.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Bind a request ID and log request start and completion."""

    async def dispatch(self, request: Request, call_next) -> Response:
        log = request.app.state.logger
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        log.info("request.started", method=request.method, path=request.url.path)
        started = time.perf_counter()
        status = 500
        try:
            response: Response = await call_next(request)
            status = response.status_code
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            fields = {
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": duration_ms,
            }
            log.info("request.completed", **fields)
            if duration_ms > SLOW_REQUEST_MS:
                log.warning("request.slow", **fields)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
