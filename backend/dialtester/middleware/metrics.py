"""
Prometheus HTTP metrics middleware.
"""
import re
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from dialtester.core.metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress
)

_ID_SEGMENT = re.compile(r"^(\d+|[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})$")


def normalize_path(path: str) -> str:
    """Collapse session ids and numeric segments to ``{id}`` to bound label cardinality."""
    return "/".join("{id}" if _ID_SEGMENT.match(part) else part for part in path.split("/"))


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts and times every request except scrapes of ``/metrics`` itself."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        labels = {"method": request.method, "endpoint": normalize_path(request.url.path)}
        status_code = 500

        with http_requests_in_progress.labels(**labels).track_inprogress(), \
                http_request_duration_seconds.labels(**labels).time():
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                http_requests_total.labels(status_code=status_code, **labels).inc()

        return response
