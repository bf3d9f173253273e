"""
Core metrics collection for the readiness scoring engine using Prometheus
"""
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, Info, generate_latest

from core.config import settings
from core.logging import get_logger

# Create a global registry for the application
REGISTRY = CollectorRegistry()

# Application info
app_info = Info("readiness_app", "Readiness scoring application information", registry=REGISTRY)

# Request metrics
request_count = Counter(
    "readiness_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

request_duration = Histogram(
    "readiness_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

# Scoring metrics
scores_computed = Counter(
    "readiness_scores_computed_total",
    "Total number of score computations",
    ["sector", "stage"],
    registry=REGISTRY,
)

scoring_duration = Histogram(
    "readiness_scoring_duration_seconds",
    "Time taken to compute a readiness score",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
    registry=REGISTRY,
)

readiness_buckets = Counter(
    "readiness_bucket_assignments_total",
    "Readiness bucket assignments",
    ["bucket"],
    registry=REGISTRY,
)

# Cache metrics
cache_hits = Counter(
    "readiness_cache_hits_total",
    "Total cache hits",
    ["cache_type"],
    registry=REGISTRY,
)

cache_misses = Counter(
    "readiness_cache_misses_total",
    "Total cache misses",
    ["cache_type"],
    registry=REGISTRY,
)

# Configuration metrics
config_versions_created = Counter(
    "readiness_config_versions_total",
    "Scoring configuration versions created",
    ["action"],
    registry=REGISTRY,
)

active_config_version = Gauge(
    "readiness_active_config_version",
    "Version number of the active scoring configuration",
    registry=REGISTRY,
)

config_reload_total = Counter(
    "readiness_config_reload_total",
    "Total active configuration refetches",
    ["config_type", "status"],
    registry=REGISTRY,
)

# Rescore metrics
rescore_results = Counter(
    "readiness_rescore_results_total",
    "Rescore outcomes per assessment",
    ["status"],
    registry=REGISTRY,
)

rescore_batch_duration = Histogram(
    "readiness_rescore_batch_duration_seconds",
    "Duration of full rescore batches",
    buckets=(0.1, 0.5, 1.0, 5.0, 30.0, 120.0, 600.0),
    registry=REGISTRY,
)

# Error metrics
error_count = Counter(
    "readiness_errors_total",
    "Total number of errors",
    ["error_type", "domain"],
    registry=REGISTRY,
)


class MetricsCollector:
    """Helper class for collecting metrics"""

    def __init__(self):
        self.logger = get_logger("metrics")
        self.enabled = settings.prometheus_enabled

        app_info.info({"version": settings.app_version, "environment": settings.environment})

    def track_request(self, method: str, endpoint: str, status: int, duration: float):
        """Track HTTP request metrics"""
        if not self.enabled:
            return
        request_count.labels(method=method, endpoint=endpoint, status=str(status)).inc()
        request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def track_score_computed(self, sector: str, stage: str, bucket: str, duration: float):
        """Track a completed score computation"""
        if not self.enabled:
            return
        scores_computed.labels(sector=sector, stage=stage).inc()
        readiness_buckets.labels(bucket=bucket).inc()
        scoring_duration.observe(duration)

    def track_cache_hit(self, cache_type: str = "memory"):
        """Track cache hit"""
        if self.enabled:
            cache_hits.labels(cache_type=cache_type).inc()

    def track_cache_miss(self, cache_type: str = "memory"):
        """Track cache miss"""
        if self.enabled:
            cache_misses.labels(cache_type=cache_type).inc()

    def track_config_version(self, action: str, version: int):
        """Track creation of a new scoring configuration version"""
        if not self.enabled:
            return
        config_versions_created.labels(action=action).inc()
        active_config_version.set(version)

    def track_config_reload(self, config_type: str, status: str = "success"):
        """Track active configuration refetches"""
        if self.enabled:
            config_reload_total.labels(config_type=config_type, status=status).inc()

    def track_rescore(self, success: bool):
        """Track a single rescore outcome"""
        if self.enabled:
            rescore_results.labels(status="success" if success else "failure").inc()

    def track_rescore_batch(self, duration: float):
        """Track a completed rescore batch"""
        if self.enabled:
            rescore_batch_duration.observe(duration)

    def track_error(self, error_type: str, domain: str):
        """Track errors"""
        if self.enabled:
            error_count.labels(error_type=error_type, domain=domain).inc()

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format"""
        return generate_latest(REGISTRY)


# Global metrics collector instance
metrics = MetricsCollector()


def get_metrics_response() -> tuple[bytes, str]:
    """Get metrics response for HTTP endpoint"""
    return metrics.get_metrics(), CONTENT_TYPE_LATEST
