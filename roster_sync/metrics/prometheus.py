# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics: single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "rostersync_requests_total",
    "Total HTTP requests to roster sync service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "rostersync_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "rostersync_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Sync Metrics (updated by service layer only) ──
SWEEPS_TOTAL = Counter(
    "rostersync_sweeps_total",
    "Total roster sweeps started",
    ["trigger"],
)
SWEEPS_SKIPPED = Counter(
    "rostersync_sweeps_skipped_total",
    "Scheduled sweeps skipped",
    ["reason"],
)
PAGES_FETCHED = Counter(
    "rostersync_pages_fetched_total",
    "Roster member list pages fetched successfully",
    ["roster"],
)
FETCH_FAILURES = Counter(
    "rostersync_fetch_failures_total",
    "Roster page fetches aborted",
    ["roster", "reason"],
)
FETCH_LATENCY = Histogram(
    "rostersync_fetch_duration_seconds",
    "Outbound roster page request latency in seconds",
)
MEMBERS_DISCOVERED = Counter(
    "rostersync_members_discovered_total",
    "Previously unseen members enqueued for apply",
    ["roster"],
)
APPLY_OUTCOMES = Counter(
    "rostersync_apply_total",
    "Apply queue drain outcomes",
    ["outcome"],
)
QUEUE_DEPTH = Gauge(
    "rostersync_apply_queue_depth",
    "Members waiting in the apply queue",
)
KNOWN_MEMBERS = Gauge(
    "rostersync_known_members",
    "Distinct member IDs seen since startup",
)
BACKOFF_ACTIVE = Gauge(
    "rostersync_backoff_active",
    "1 while polling is suspended by backoff",
)
BACKOFF_ACTIVATIONS = Counter(
    "rostersync_backoff_activations_total",
    "Times the backoff state was entered",
)
