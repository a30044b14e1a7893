"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'ticketbari_booking_attempts_total',
    'Total seat reservation attempts',
    ['status']  # reserved, seat_conflict, insufficient_quantity, invalid
)

booking_decisions = Counter(
    'ticketbari_booking_decisions_total',
    'Vendor decisions and customer cancellations',
    ['decision']  # approved, rejected, cancelled
)

# Payment metrics
payment_confirmations = Counter(
    'ticketbari_payment_confirmations_total',
    'Payment confirmation outcomes',
    ['result']  # applied, already_applied, invalid_state, insufficient_quantity
)

payment_intent_latency = Histogram(
    'ticketbari_payment_intent_latency_seconds',
    'Payment gateway intent creation latency',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# Advertisement metrics
advertise_toggles = Counter(
    'ticketbari_advertise_toggles_total',
    'Advertisement toggle outcomes',
    ['result']  # on, off, limit_reached
)

# Cache metrics
cache_operations = Counter(
    'ticketbari_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get: hit/miss, set: ok, invalidate: ok
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    booking_attempts.labels(status=status).inc()


def record_booking_decision(decision: str):
    booking_decisions.labels(decision=decision).inc()


def record_payment_confirmation(result: str):
    payment_confirmations.labels(result=result).inc()


def record_advertise_toggle(result: str):
    advertise_toggles.labels(result=result).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()
