"""
Metrics Collection with Prometheus.

Tracks outbound Flow API calls and onboarding outcomes.
"""

import time
from enum import Enum

from prometheus_client import Counter, Histogram, Info

from flowbridge.config import settings


class MetricLabels(str, Enum):
    """Standard metric label names."""

    ENDPOINT = "endpoint"
    METHOD = "method"
    OUTCOME = "outcome"
    CODE = "code"


class FlowMetrics:
    """
    Centralized metrics for flowbridge.

    - Flow API requests (rate, duration, outcome)
    - Flow API errors by normalized code
    - User onboarding (success/failure)
    """

    def __init__(self) -> None:
        """Initialize all Prometheus metrics."""
        self.service_info = Info(
            "flowbridge_service",
            "Service information",
        )
        self.service_info.info(
            {
                "version": settings.service_version,
                "service_name": settings.service_name,
            }
        )

        # ====================================================================
        # Provider Request Metrics
        # ====================================================================
        self.provider_requests_total = Counter(
            "flowbridge_provider_requests_total",
            "Total Flow API requests",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD, MetricLabels.OUTCOME],
        )

        self.provider_request_duration_seconds = Histogram(
            "flowbridge_provider_request_duration_seconds",
            "Flow API request duration in seconds",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD],
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        )

        self.provider_errors_total = Counter(
            "flowbridge_provider_errors_total",
            "Total Flow API failures by normalized code",
            [MetricLabels.ENDPOINT, MetricLabels.CODE],
        )

        # ====================================================================
        # Onboarding Metrics
        # ====================================================================
        self.users_onboarded_total = Counter(
            "flowbridge_users_onboarded_total",
            "Total new users processed into Flow customers",
            ["success"],
        )

    def record_provider_request(
        self, endpoint: str, method: str, duration: float, error_code: int | None = None
    ) -> None:
        """Record one Flow API call."""
        if not settings.metrics_enabled:
            return
        outcome = "success" if error_code is None else "failure"
        self.provider_requests_total.labels(
            endpoint=endpoint, method=method, outcome=outcome
        ).inc()
        self.provider_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(
            duration
        )
        if error_code is not None:
            self.provider_errors_total.labels(endpoint=endpoint, code=str(error_code)).inc()

    def record_onboarding(self, success: bool) -> None:
        """Record the outcome of a user onboarding."""
        if not settings.metrics_enabled:
            return
        self.users_onboarded_total.labels(success=str(success)).inc()


# Global metrics instance
metrics = FlowMetrics()


class track_provider_request:
    """
    Context manager for tracking Flow API calls.

    Usage:
        with track_provider_request("/customer/create", "POST") as tracker:
            # ... call Flow
            tracker.set_error_code(exc.code)
    """

    def __init__(self, endpoint: str, method: str) -> None:
        self.endpoint = endpoint
        self.method = method
        self.error_code: int | None = None
        self.start_time: float = 0.0

    def set_error_code(self, code: int) -> None:
        """Mark the call as failed with a normalized code."""
        self.error_code = code

    def __enter__(self) -> "track_provider_request":
        """Start tracking."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Record metrics."""
        duration = time.perf_counter() - self.start_time
        if exc_type is not None and self.error_code is None:
            self.error_code = 500
        metrics.record_provider_request(self.endpoint, self.method, duration, self.error_code)
