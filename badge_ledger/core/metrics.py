"""Application metrics using the Prometheus client library.

Single inventory of everything the service measures.  Other modules
import specific metrics and increment/observe them at the point of action.

Counters only go up; the ledger counters are labelled by operation and
outcome so a dashboard can show rejection rates per command:

  rate(ledger_commands_total{outcome!="ok"}[5m])
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
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Ledger metrics
# ---------------------------------------------------------------------------

LEDGER_COMMANDS = Counter(
    "ledger_commands_total",
    "Ledger commands by operation and outcome",
    ["operation", "outcome"],  # outcome: "ok" or an error kind
)

POINTS_MOVED = Counter(
    "points_moved_total",
    "Points moved by the points ledger",
    ["kind"],  # award|deduct|transfer|redeem
)

# Refreshed from the store on every scrape of /metrics.
BADGES_ISSUED = Gauge(
    "ledger_badges",
    "Badges ever issued (revoked and expired included)",
)

POINTS_CIRCULATING = Gauge(
    "ledger_points_circulating",
    "Points issued minus points deducted and redeemed",
)
