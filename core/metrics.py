"""
Prometheus metrics for the prompt cleaner service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total license keys issued",
)

license_issuance_collisions_total = Counter(
    "license_issuance_collisions_total",
    "Generated license keys that collided with an existing key",
)

licenses_redeemed_total = Counter(
    "licenses_redeemed_total",
    "Total license keys redeemed",
)

license_redemptions_rejected_total = Counter(
    "license_redemptions_rejected_total",
    "Total license redemptions rejected",
    ["reason"],
)

# Prompt metrics
prompt_clean_requests_total = Counter(
    "prompt_clean_requests_total",
    "Total prompt cleaning requests relayed upstream",
    ["tier", "model"],
)

upstream_request_duration_seconds = Histogram(
    "upstream_request_duration_seconds",
    "LLM API request duration in seconds",
    ["model"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0],
)

upstream_errors_total = Counter(
    "upstream_errors_total",
    "Total LLM API failures",
    ["error_code"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
