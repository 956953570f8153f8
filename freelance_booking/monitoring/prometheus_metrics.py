"""
Prometheus metrics for the booking core.

Service timings come from the @measure_operation decorator; the calendar
lock and the notification dispatcher record their own outcomes.
"""

import logging
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Dedicated registry so repeated imports in tests never collide with the default one
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "freelance_booking_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "freelance_booking_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "freelance_booking_errors_total",
    "Total number of service errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

calendar_lock_total = Counter(
    "freelance_booking_calendar_lock_total",
    "Calendar mutex outcomes",
    ["action", "outcome"],
    registry=REGISTRY,
)

notifications_total = Counter(
    "freelance_booking_notifications_total",
    "Notification dispatcher outcomes",
    ["type", "outcome"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_calendar_lock(action: str, outcome: str) -> None:
        try:
            calendar_lock_total.labels(action=action, outcome=outcome).inc()
        except Exception as exc:
            logger.debug("Failed to record calendar lock metric: %s", exc)

    @staticmethod
    def record_notification(notification_type: str, outcome: str) -> None:
        try:
            notifications_total.labels(type=notification_type, outcome=outcome).inc()
        except Exception as exc:
            logger.debug("Failed to record notification metric: %s", exc)

    @staticmethod
    def get_metrics() -> bytes:
        """Generate metrics in the Prometheus exposition format."""
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
