"""Run metrics for the intersection simulation."""

from .collector import MetricSnapshot, MetricsCollector

__all__ = ["MetricSnapshot", "MetricsCollector"]
