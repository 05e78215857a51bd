"""
Shared metrics configuration for the ID token verifier.
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class MetricsCollector:
    """Prometheus metrics for token validations and key set refreshes."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        # Metric names are unique per registry, so each collector owns one.
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up verifier metrics."""
        self._metrics["token_validations_total"] = Counter(
            "token_validations_total",
            "Total token validations",
            ["status"],
            registry=self.registry
        )

        self._metrics["jwks_refresh_total"] = Counter(
            "jwks_refresh_total",
            "Total JWKS refreshes",
            ["status"],
            registry=self.registry
        )

        self._metrics["jwks_refresh_duration_seconds"] = Histogram(
            "jwks_refresh_duration_seconds",
            "JWKS refresh duration in seconds",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_validation(self, status: str):
        """Record the outcome of one token validation."""
        self._metrics["token_validations_total"].labels(status=status).inc()

    def record_refresh(self, status: str):
        """Record the outcome of one key set refresh."""
        self._metrics["jwks_refresh_total"].labels(status=status).inc()

    @contextmanager
    def time_refresh(self):
        """Context manager to time a key set refresh."""
        start_time = time.time()
        try:
            yield
        finally:
            self._metrics["jwks_refresh_duration_seconds"].observe(time.time() - start_time)

    def sample(self, name: str, **labels) -> float:
        """Read the current value of a counter sample (0.0 when unset)."""
        value = self.registry.get_sample_value(name, labels or None)
        return value or 0.0


def get_metrics_collector(registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector."""
    return MetricsCollector(registry)
