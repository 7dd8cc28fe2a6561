"""Prometheus metrics for push delivery.

Usage:
    from push_service.infra.push.metrics import track_request, track_outcomes

    track_request(operation="multicast", status="success", duration=0.12)
    track_outcomes(result.ordered_outcomes)
"""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import Counter, Histogram

from push_service.infra.push.results import Failure, Indeterminate, Outcome, Success

# =============================================================================
# Request Metrics
# =============================================================================

push_requests_total = Counter(
    "push_requests_total",
    "Total number of HTTP requests sent to the push service",
    labelnames=["operation", "status"],
)
"""
Counter for every request attempt.

Labels:
    operation: single or multicast
    status: success, transport_error, protocol_error

Example:
    push_requests_total.labels(operation="single", status="success").inc()
"""

push_request_duration_seconds = Histogram(
    "push_request_duration_seconds",
    "Push service round trip duration in seconds",
    labelnames=["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
"""
Histogram of round trip latency, including failed requests.

Labels:
    operation: single or multicast
"""

# =============================================================================
# Retry Metrics
# =============================================================================

push_retry_attempts_total = Counter(
    "push_retry_attempts_total",
    "Total number of retry attempts after a backoff sleep",
    labelnames=["operation"],
)

push_retry_delay_seconds = Histogram(
    "push_retry_delay_seconds",
    "Backoff sleep duration before a retry",
    labelnames=["operation"],
    buckets=[0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 64.0, 128.0, 256.0, 512.0, 1536.0],
)
"""
Histogram of backoff delays.

Buckets follow the doubling ceiling, up to 1.5x the default maximum.
"""

push_retry_exhausted_total = Counter(
    "push_retry_exhausted_total",
    "Total number of sends that ran out of attempts without a result",
    labelnames=["operation"],
)

# =============================================================================
# Outcome Metrics
# =============================================================================

push_recipient_outcomes_total = Counter(
    "push_recipient_outcomes_total",
    "Final per-recipient outcomes",
    labelnames=["outcome", "error_code"],
)
"""
Counter of final outcomes, one increment per recipient.

Labels:
    outcome: success, failure, indeterminate
    error_code: Service error token for failures, empty otherwise

Example:
    push_recipient_outcomes_total.labels(outcome="failure", error_code="NotRegistered").inc()
"""

push_canonical_ids_total = Counter(
    "push_canonical_ids_total",
    "Total number of successes that reported a replacement recipient id",
)


# =============================================================================
# Helpers
# =============================================================================


def track_request(operation: str, status: str, duration: float) -> None:
    """Record one request attempt and its latency."""
    push_requests_total.labels(operation=operation, status=status).inc()
    push_request_duration_seconds.labels(operation=operation).observe(duration)


def track_retry(operation: str, delay: float) -> None:
    """Record a backoff sleep preceding another attempt."""
    push_retry_attempts_total.labels(operation=operation).inc()
    push_retry_delay_seconds.labels(operation=operation).observe(delay)


def track_retry_exhausted(operation: str) -> None:
    push_retry_exhausted_total.labels(operation=operation).inc()


def track_outcomes(outcomes: Iterable[Outcome]) -> None:
    """Record final per-recipient outcomes."""
    for outcome in outcomes:
        if isinstance(outcome, Success):
            push_recipient_outcomes_total.labels(outcome="success", error_code="").inc()
            if outcome.canonical_id is not None:
                push_canonical_ids_total.inc()
        elif isinstance(outcome, Failure):
            push_recipient_outcomes_total.labels(
                outcome="failure", error_code=outcome.error_code
            ).inc()
        elif isinstance(outcome, Indeterminate):
            push_recipient_outcomes_total.labels(outcome="indeterminate", error_code="").inc()
