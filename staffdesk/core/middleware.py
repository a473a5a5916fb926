import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from staffdesk.core.config import settings
from staffdesk.core.logging import request_id_var

logger = logging.getLogger("staffdesk.requests")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds an X-Request-ID to the request context and echoes it back."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(settings.request_id_header) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[settings.request_id_header] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        response.headers["X-Process-Time"] = str(elapsed_ms)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={"status_code": response.status_code, "duration_ms": elapsed_ms},
        )
        return response
