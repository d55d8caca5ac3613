"""
Shared metrics configuration for the CRPT submission client.
"""

from prometheus_client import Counter, Histogram, Info, start_http_server, CollectorRegistry
from typing import Dict, Any, Optional
import threading
import time
from contextlib import contextmanager


# Ports already serving a registry in this process
_served_ports: Dict[int, CollectorRegistry] = {}
_collectors: Dict[str, "MetricsCollector"] = {}
_lock = threading.Lock()


class MetricsCollector:
    """Centralized metrics collector for the client.

    Each collector registers into its own ``CollectorRegistry`` unless one is
    passed in, so several clients (or tests) can coexist in one process.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the client."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        self._setup_throttle_metrics()
        self._setup_submission_metrics()

    def _setup_throttle_metrics(self):
        """Set up throttle gate metrics."""
        self._metrics["throttle_admissions_total"] = Counter(
            "throttle_admissions_total",
            "Total admissions granted by the throttle gate",
            registry=self.registry
        )

        self._metrics["throttle_wait_seconds"] = Histogram(
            "throttle_wait_seconds",
            "Time callers spent waiting for admission",
            registry=self.registry
        )

        self._metrics["throttle_cancellations_total"] = Counter(
            "throttle_cancellations_total",
            "Total admission waits aborted before a grant",
            ["reason"],
            registry=self.registry
        )

    def _setup_submission_metrics(self):
        """Set up document submission metrics."""
        self._metrics["submissions_total"] = Counter(
            "submissions_total",
            "Total document submissions",
            ["product_group", "outcome"],
            registry=self.registry
        )

        self._metrics["submission_duration_seconds"] = Histogram(
            "submission_duration_seconds",
            "Submission duration in seconds, including throttle wait",
            ["product_group"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a single sample from this collector's registry."""
        return self.registry.get_sample_value(name, labels or {})

    def start_metrics_server(self, port: int = 9090) -> bool:
        """Start the Prometheus metrics server unless one already listens on ``port``."""
        with _lock:
            if port in _served_ports:
                return False
            start_http_server(port, registry=self.registry)
            _served_ports[port] = self.registry
            return True

    def record_admission(self, waited_seconds: float):
        """Record a throttle admission and how long it waited."""
        self._metrics["throttle_admissions_total"].inc()
        self._metrics["throttle_wait_seconds"].observe(waited_seconds)

    def record_cancellation(self, reason: str):
        """Record an aborted admission wait."""
        self._metrics["throttle_cancellations_total"].labels(reason=reason).inc()

    def record_submission(self, product_group: str, outcome: str):
        """Record submission metrics."""
        self._metrics["submissions_total"].labels(
            product_group=product_group,
            outcome=outcome
        ).inc()

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Context manager to time an operation."""
        start_time = time.time()
        try:
            yield
        finally:
            duration = time.time() - start_time
            if operation_name in self._metrics:
                metric = self._metrics[operation_name]
                if labels:
                    metric = metric.labels(**labels)
                metric.observe(duration)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service.

    Without an explicit registry, one collector per service name is shared
    process-wide.
    """
    if registry is not None:
        return MetricsCollector(service_name, registry)
    with _lock:
        if service_name not in _collectors:
            _collectors[service_name] = MetricsCollector(service_name)
        return _collectors[service_name]
