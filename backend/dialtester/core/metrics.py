"""
Prometheus metrics for the gateway API and the recorder client.
"""
from prometheus_client import Counter, Histogram, Gauge, Info
from prometheus_client import CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST

from dialtester.core.config import settings
from dialtester.models.database.data_points import MIN_VALUE, MAX_VALUE

registry = CollectorRegistry()

app_info = Info('dial_tester', 'Dial tester build information', registry=registry)
app_info.info({
    'name': settings.APP_NAME,
    'version': settings.APP_VERSION,
    'environment': settings.ENVIRONMENT,
})

# HTTP
http_requests_total = Counter(
    'http_requests_total',
    'HTTP requests by route and status',
    ['method', 'endpoint', 'status_code'],
    registry=registry
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency',
    ['method', 'endpoint'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    registry=registry
)

http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'HTTP requests currently being served',
    ['method', 'endpoint'],
    registry=registry
)

# Sessions and data points, counted once the store accepts them
sessions_created_total = Counter(
    'sessions_created_total',
    'Recording sessions started',
    registry=registry
)

sessions_completed_total = Counter(
    'sessions_completed_total',
    'Recording sessions given an end time',
    registry=registry
)

data_points_stored_total = Counter(
    'data_points_stored_total',
    'Dial samples persisted',
    registry=registry
)

data_point_value = Histogram(
    'data_point_value',
    'Distribution of persisted dial values',
    buckets=list(range(MIN_VALUE, MAX_VALUE + 1, 25)),
    registry=registry
)

# Recorder write path; one of delivered, failed or dropped per sample
data_point_writes_total = Counter(
    'data_point_writes_total',
    'Client-side data point writes by outcome',
    ['outcome'],
    registry=registry
)

errors_total = Counter(
    'errors_total',
    'Errors returned to API callers',
    ['error_type', 'endpoint'],
    registry=registry
)

websocket_connections_active = Gauge(
    'websocket_connections_active',
    'Open live dashboard websockets',
    registry=registry
)


def get_metrics() -> bytes:
    """Current registry contents in the Prometheus text format."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
