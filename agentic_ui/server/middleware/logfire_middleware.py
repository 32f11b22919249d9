"""
Logfire Middleware for FastAPI.

Times every request, reports it through ``log_api_request`` and adds the
``X-Process-Time`` header (milliseconds). Streaming responses are timed up to
the point the response starts, not until the stream ends.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from agentic_ui.core.logging_config import get_logger
from agentic_ui.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000


class LogfireMiddleware(BaseHTTPMiddleware):
    """Middleware for timing API requests and reporting them to Logfire."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"API request failed: {method} {path} after {duration_ms:.2f}ms", exc_info=True)
            log_api_request(method=method, path=path, status_code=500, duration_ms=duration_ms)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_api_request(method=method, path=path, status_code=response.status_code, duration_ms=duration_ms)
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(f"Slow API request: {method} {path} took {duration_ms:.2f}ms")

        return response
