"""
Prometheus metrics for the license dashboard service.

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
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License lifecycle metrics
licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses created",
    ["status", "source"],
)

license_status_transitions_total = Counter(
    "license_status_transitions_total",
    "License status changes decided by the lifecycle",
    ["from_status", "to_status", "reason"],
)

licenses_swept_total = Counter(
    "licenses_swept_total",
    "Active licenses bulk-expired before listing or by the sweep command",
    ["trigger"],
)

# Invoice metrics
invoice_operations_total = Counter(
    "invoice_operations_total",
    "Invoice mutations by operation",
    ["operation"],
)

# Device metrics
device_activations_total = Counter(
    "device_activations_total",
    "Device activation attempts by outcome",
    ["outcome"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
