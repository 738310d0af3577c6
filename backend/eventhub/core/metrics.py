"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['outcome']  # success, insufficient_inventory, event_not_bookable, storage_error, ...
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Reservation coordinator latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0]
)

booked_seats = Counter(
    'booked_seats_total',
    'Seats sold through confirmed bookings'
)

booking_cancellations = Counter(
    'booking_cancellations_total',
    'Booking cancel requests',
    ['result']  # cancelled, noop
)

# Compensation metrics
inventory_compensations = Counter(
    'inventory_compensations_total',
    'Seat releases issued after a failed ledger append',
    ['reason']
)

inventory_compensation_failures = Counter(
    'inventory_compensation_failures_total',
    'Compensating releases that themselves failed'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(outcome: str):
    booking_attempts.labels(outcome=outcome).inc()


def record_cancellation(transitioned: bool):
    booking_cancellations.labels(result="cancelled" if transitioned else "noop").inc()


def record_compensation(reason: str):
    inventory_compensations.labels(reason=reason).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
