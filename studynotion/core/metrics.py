"""Prometheus metric inventory.

Every metric the service exposes is declared here; the modules that own
the behavior import and update them.  Counters only go up, so dashboards
work with rate() and tests assert on deltas.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Checkout calls out to the payment gateway, hence the long tail.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Marketplace metrics
# ---------------------------------------------------------------------------

ORDERS_CREATED = Counter(
    "orders_created_total",
    "Payment orders requested from the gateway",
)

PAYMENT_VERIFICATIONS = Counter(
    "payment_verifications_total",
    "Payment signature checks by result",
    ["result"],  # "verified" or "failed"
)

ENROLLMENTS = Counter(
    "enrollments_total",
    "Buyer/course enrollments committed",
)

REVIEWS_CREATED = Counter(
    "reviews_created_total",
    "Course reviews recorded",
)

EMAILS_PROCESSED = Counter(
    "emails_processed_total",
    "Email tasks handled by the worker",
    ["result"],  # "sent" or "failed"
)

QUEUE_DEPTH = Gauge(
    "task_queue_depth",
    "Number of tasks waiting in a queue",
    ["queue_name"],
)
