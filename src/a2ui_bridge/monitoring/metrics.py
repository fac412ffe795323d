"""
Metrics Collection
Prometheus metrics for message processing and action dispatch
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, REGISTRY, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the processor.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.registry = registry

        # Message metrics
        self.messages_total = Counter(
            "a2ui_messages_total",
            "Total number of protocol messages processed",
            ["kind", "status"],
            registry=registry,
        )
        self.message_duration = Histogram(
            "a2ui_message_duration_seconds",
            "Time to apply one message and publish its snapshot",
            ["kind"],
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=registry,
        )
        self.components_upserted = Counter(
            "a2ui_components_upserted_total",
            "Total number of component upserts",
            ["result"],
            registry=registry,
        )

        # Protocol warnings
        self.protocol_warnings = Counter(
            "a2ui_protocol_warnings_total",
            "Non-fatal protocol problems (unknown kinds, unknown types, ...)",
            ["type"],
            registry=registry,
        )
        self.parse_errors = Counter(
            "a2ui_parse_errors_total",
            "Payloads rejected at the transport boundary",
            ["source"],
            registry=registry,
        )

        # Surfaces
        self.active_surfaces = Gauge(
            "a2ui_active_surfaces",
            "Number of live surfaces",
            registry=registry,
        )

        # Actions
        self.actions_total = Counter(
            "a2ui_actions_total",
            "Total number of user actions dispatched",
            ["status"],
            registry=registry,
        )

        # Stream metrics
        self.stream_chunks = Counter(
            "a2ui_stream_chunks_total",
            "Total number of transport chunks fed to the stream decoder",
            registry=registry,
        )

    def record_message(self, kind: str, status: str, duration: float) -> None:
        """Record one processed message."""
        self.messages_total.labels(kind=kind, status=status).inc()
        self.message_duration.labels(kind=kind).observe(duration)

    def record_upsert(self, created: bool) -> None:
        """Record a component upsert."""
        self.components_upserted.labels(result="created" if created else "replaced").inc()

    def record_warning(self, warning_type: str) -> None:
        """Record a non-fatal protocol warning."""
        self.protocol_warnings.labels(type=warning_type).inc()

    def record_parse_error(self, source: str) -> None:
        """Record a rejected payload."""
        self.parse_errors.labels(source=source).inc()

    def set_active_surfaces(self, count: int) -> None:
        """Set the live surface count."""
        self.active_surfaces.set(count)

    def record_action(self, status: str) -> None:
        """Record an action dispatch attempt."""
        self.actions_total.labels(status=status).inc()

    def record_stream_chunk(self) -> None:
        """Record a chunk fed to the stream decoder."""
        self.stream_chunks.inc()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)


class NullMetrics(MetricsCollector):
    """Collector that records nothing; used when metrics are disabled."""

    def __init__(self) -> None:
        super().__init__(registry=CollectorRegistry())

    def record_message(self, kind: str, status: str, duration: float) -> None:
        pass

    def record_upsert(self, created: bool) -> None:
        pass

    def record_warning(self, warning_type: str) -> None:
        pass

    def record_parse_error(self, source: str) -> None:
        pass

    def set_active_surfaces(self, count: int) -> None:
        pass

    def record_action(self, status: str) -> None:
        pass

    def record_stream_chunk(self) -> None:
        pass


# Global metrics collector instance
metrics_collector = MetricsCollector()
