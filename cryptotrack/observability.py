# cryptotrack/observability.py
from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ---- Prometheus metrics (low-cardinality labels) ----
REQUEST_COUNT = Counter(
    "ct_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "ct_http_request_duration_seconds",
    "HTTP request latency (seconds)",
    buckets=(0.005, 0.01, 0.02, 0.05, 0.1, 0.2, 0.5, 1.0, 2.5, 5.0),
)

CACHE_REQUESTS = Counter(
    "ct_cache_requests_total",
    "Response cache lookups",
    ["resource", "result"],
)

UPSTREAM_REQUESTS = Counter(
    "ct_upstream_requests_total",
    "Calls made to the market-data provider",
    ["resource", "outcome"],
)


def metrics_endpoint():
    """Return Prometheus exposition format."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


def _route_path(request: Request) -> str:
    # route template keeps /api/coins/{coin_id} as one label value
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


# ---- Per-request timing + JSON request log ----
async def timing_middleware(request: Request, call_next: Callable):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    path = _route_path(request)
    status = str(response.status_code)

    REQUEST_COUNT.labels(method=request.method, path=path, status=status).inc()
    REQUEST_LATENCY.observe(elapsed)

    logging.getLogger("request").info(
        json.dumps(
            {
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_s": round(elapsed, 6),
                "client": request.client.host if request.client else None,
            }
        )
    )
    return response
