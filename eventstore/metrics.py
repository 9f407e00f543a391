"""
Prometheus metrics for the event store service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
import psutil
import os


class Metrics:
    """
    Centralized metrics for the event store service.
    """

    def __init__(self, service_name: str = "eventstore", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Business Metrics - event store specific
        self.events_created_total = Counter(
            "eventstore_events_created_total",
            "Total events created",
            registry=self.registry,
        )

        self.event_lookups_total = Counter(
            "eventstore_event_lookups_total",
            "Event lookups by outcome",
            ["result"],
            registry=self.registry,
        )

        self.store_errors_total = Counter(
            "eventstore_store_errors_total",
            "Backing store failures",
            ["operation"],
            registry=self.registry,
        )

        self.event_body_bytes = Histogram(
            "eventstore_event_body_bytes",
            "Event body size in bytes",
            buckets=(64, 256, 1024, 4096, 16384, 65536, 262144, 400000),
            registry=self.registry,
        )

        self.store_latency = Histogram(
            "eventstore_store_latency_seconds",
            "Backing store call latency in seconds",
            ["operation"],
            registry=self.registry,
        )

        # System Metrics
        self._setup_process_metrics()

    def _setup_process_metrics(self):
        """Set up process-level metrics using psutil."""
        # Memory
        self.process_memory_bytes = Gauge(
            "eventstore_process_resident_memory_bytes",
            "Resident memory size in bytes",
            ["service"],
            registry=self.registry,
        )

        # File descriptors
        self.process_open_fds = Gauge(
            "eventstore_process_open_fds",
            "Number of open file descriptors",
            ["service"],
            registry=self.registry,
        )

        self.update_system_metrics()

    def update_system_metrics(self):
        """Update system metrics from psutil."""
        try:
            process = psutil.Process(os.getpid())

            memory_info = process.memory_info()
            self.process_memory_bytes.labels(service=self.service_name).set(memory_info.rss)

            try:
                num_fds = process.num_fds()
                self.process_open_fds.labels(service=self.service_name).set(num_fds)
            except AttributeError:
                # num_fds() not available on all platforms
                pass

        except psutil.Error:
            pass

    def record_event_created(self, size_bytes: int):
        """Record a stored event."""
        self.events_created_total.inc()
        self.event_body_bytes.observe(size_bytes)

    def record_lookup(self, result: str):
        """Record a lookup outcome: found, not_found or error."""
        self.event_lookups_total.labels(result=result).inc()

    def record_store_error(self, operation: str):
        self.store_errors_total.labels(operation=operation).inc()

    def observe_store_latency(self, operation: str, seconds: float):
        self.store_latency.labels(operation=operation).observe(seconds)
