"""
Performance Monitoring
Prometheus-based metrics collection for the message processor
"""

from .metrics import MetricsCollector, NullMetrics, metrics_collector

__all__ = [
    "MetricsCollector",
    "NullMetrics",
    "metrics_collector",
]
