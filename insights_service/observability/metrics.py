from __future__ import annotations

import time
from typing import Awaitable, Callable, Mapping

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    labelnames=("endpoint", "method", "status"),
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("endpoint", "method"),
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)
pipeline_duration_seconds = Histogram(
    "insight_pipeline_duration_seconds",
    "End-to-end insight pipeline duration in seconds",
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 60.0, 120.0),
)
pipeline_stage_duration_seconds = Histogram(
    "insight_pipeline_stage_duration_seconds",
    "Insight pipeline stage duration in seconds",
    labelnames=("stage",),
    buckets=(0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)
insight_runs_total = Counter(
    "insight_runs_total",
    "Insight pipeline runs by outcome and failing stage",
    labelnames=("outcome", "stage"),
)
insights_by_urgency_total = Counter(
    "insights_by_urgency_total",
    "Persisted insights by urgency level",
    labelnames=("urgency",),
)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _observe_request(request, "500", start)
            raise
        _observe_request(request, str(getattr(response, "status_code", 200)), start)
        return response


def _observe_request(request: Request, status: str, start: float) -> None:
    endpoint = _endpoint_label(request)
    method = request.method
    http_requests_total.labels(endpoint=endpoint, method=method, status=status).inc()
    http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start)


def _endpoint_label(request: Request) -> str:
    # Use the route path template when available to keep label cardinality bounded
    route = request.scope.get("route")
    path = getattr(route, "path", None) or getattr(route, "path_format", None)
    if isinstance(path, str) and path:
        return path
    return request.url.path


def record_run_succeeded(total_seconds: float, stage_timings: Mapping[str, float], urgency: str) -> None:
    pipeline_duration_seconds.observe(total_seconds)
    for stage, seconds in stage_timings.items():
        pipeline_stage_duration_seconds.labels(stage=stage).observe(seconds)
    insight_runs_total.labels(outcome="success", stage="-").inc()
    insights_by_urgency_total.labels(urgency=urgency).inc()


def record_run_failed(stage: str) -> None:
    insight_runs_total.labels(outcome="failure", stage=stage).inc()


# Router to expose /metrics
router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
