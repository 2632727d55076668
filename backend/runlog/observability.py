"""Request logging and Prometheus metrics for the activity service."""

from __future__ import annotations

import json
import logging
import math
import time
import uuid
from contextvars import ContextVar
from functools import lru_cache

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from runlog.services.report import ActivityReport
from runlog.services.window import WindowSpec

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger(__name__)

REQUEST_BUCKETS_SECONDS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
REPORT_RUN_BUCKETS = (0, 1, 3, 5, 10, 20, 50)
UNMATCHED_ROUTE = "unmatched"


def get_request_id() -> str | None:
    """Return the current request id if set by middleware."""
    return request_id_ctx.get()


class ServiceMetrics:
    """Prometheus metrics for HTTP traffic and activity reports.

    Each instance owns its registry, so tests can build throwaway ones.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        self.requests = Counter(
            "runlog_http_requests",
            "HTTP requests by route and status",
            ["method", "route", "status"],
            registry=self.registry,
        )
        self.request_seconds = Histogram(
            "runlog_http_request_seconds",
            "HTTP request latency",
            ["method", "route"],
            buckets=REQUEST_BUCKETS_SECONDS,
            registry=self.registry,
        )
        self.windows = Counter(
            "runlog_activity_windows",
            "Activity pages served, by week window or default window",
            ["kind"],
            registry=self.registry,
        )
        self.report_runs = Histogram(
            "runlog_report_runs",
            "Running entries aggregated per report",
            buckets=REPORT_RUN_BUCKETS,
            registry=self.registry,
        )
        self.undefined_paces = Counter(
            "runlog_undefined_paces",
            "Paces without a finite value (zero distance)",
            ["scope"],
            registry=self.registry,
        )
        self.activities_created = Counter(
            "runlog_activities_created",
            "Stored activities by type and origin",
            ["activity_type", "source"],
            registry=self.registry,
        )

    def observe_request(self, method: str, route: str, status_code: int, seconds: float) -> None:
        self.requests.labels(method, route, str(status_code)).inc()
        self.request_seconds.labels(method, route).observe(seconds)

    def observe_report(self, window: WindowSpec, report: ActivityReport) -> None:
        """Record one served activity page."""
        self.windows.labels("default" if window.is_default else "week").inc()
        self.report_runs.observe(len(report.chart.categories))

        undefined = sum(1 for pace in report.chart.pace_series if not math.isfinite(pace))
        if undefined:
            self.undefined_paces.labels("entry").inc(undefined)
        if not math.isfinite(report.average_pace_minutes):
            self.undefined_paces.labels("average").inc()

    def observe_created(self, activity_type: str, source: str = "form", count: int = 1) -> None:
        self.activities_created.labels(activity_type, source).inc(count)

    def render(self) -> tuple[bytes, str]:
        """Exposition payload and its content type."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


@lru_cache
def get_metrics() -> ServiceMetrics:
    """Process-wide metrics instance."""
    return ServiceMetrics()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, time it, and write one JSON log line."""

    def __init__(
        self,
        app: ASGIApp,
        metrics: ServiceMetrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(app)
        self.metrics = metrics or get_metrics()
        self.logger = logger or logging.getLogger("runlog.request")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            elapsed = time.perf_counter() - started
            route = getattr(request.scope.get("route"), "path", None) or UNMATCHED_ROUTE
            self.metrics.observe_request(request.method, route, status_code, elapsed)
            self.logger.info(
                json.dumps(
                    {
                        "request_id": request_id,
                        "method": request.method,
                        "path": request.url.path,
                        "route": route,
                        "status_code": status_code,
                        "elapsed_ms": round(elapsed * 1000, 2),
                    }
                )
            )
            request_id_ctx.reset(token)
