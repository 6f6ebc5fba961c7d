"""HTTP-level Prometheus metrics and exposition."""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0)
)


def get_metrics() -> bytes:
    """Render all registered metrics in the Prometheus text format."""
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
