"""
Access logging middleware.
"""
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from dialtester.core.logging import get_logger

logger = get_logger(__name__)

# Polled or high-frequency routes; successful calls are logged at debug
QUIET_PATH_SUFFIXES = ("/data-points", "/metrics", "/health", "/admin/sessions", "/admin/overview")


def response_log_level(path: str, status_code: int) -> str:
    """Pick the logger method name for a finished request."""
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    if path.endswith(QUIET_PATH_SUFFIXES):
        return "debug"
    return "info"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and reports its duration in ``X-Process-Time``."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

        path = request.url.path
        log = getattr(logger, response_log_level(path, response.status_code))
        log(
            f"{request.method} {path} - {response.status_code} ({duration_ms:.2f}ms)",
            extra={
                "request": {
                    "method": request.method,
                    "path": path,
                    "query": str(request.query_params) or None,
                    "client": request.client.host if request.client else None,
                },
                "response": {"status_code": response.status_code, "duration_ms": round(duration_ms, 2)},
            },
        )
        return response
