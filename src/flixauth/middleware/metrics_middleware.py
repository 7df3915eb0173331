import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..metrics import REQUEST_COUNT, REQUEST_LATENCY


def _endpoint_label(request: Request) -> str:
    # route templates keep label cardinality bounded; unmatched paths share one label
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = _endpoint_label(request)
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        REQUEST_COUNT.labels(
            method=request.method, endpoint=endpoint, http_status=str(response.status_code)
        ).inc()
        return response
