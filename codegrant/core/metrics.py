"""Application metrics using the Prometheus client library.

All metrics are defined here so there is one inventory of everything the
service measures.  Other modules import a metric and increment or observe
it at the point of action.

Prometheus pulls these from GET /metrics.  Counters only go up; rates and
ratios (e.g. denied vs approved consents) are computed on the Prometheus
side with rate().
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
    # Every handler is in-memory, so most requests land in the first buckets.
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Authorization server metrics
# ---------------------------------------------------------------------------
# Incremented by AuthorizationServer.  The outcome label carries the error
# code (or "approve"/"code_issued" on success), so dashboards can break down
# why requests are rejected.

CLIENTS_REGISTERED = Counter(
    "oauth_clients_registered_total",
    "Client applications registered",
)

AUTHORIZE_OUTCOMES = Counter(
    "oauth_authorize_outcomes_total",
    "Authorization requests by outcome",
    ["outcome"],  # "approve", "unknown_client", "invalid_redirect_uri"
)

APPROVE_OUTCOMES = Counter(
    "oauth_approve_outcomes_total",
    "Consent decisions by outcome",
    ["outcome"],  # "code_issued", "access_denied", "unsupported_response_type", "no_request"
)

PENDING_REQUESTS = Gauge(
    "oauth_pending_requests",
    "Authorization requests staged and awaiting a consent decision",
)
