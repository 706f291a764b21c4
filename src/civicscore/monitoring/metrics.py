"""Metrics collection for priority scoring operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from threading import Lock

from civicscore.logging_config import get_logger

logger = get_logger(__name__)


class MetricType(Enum):
    """Type of metric."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


@dataclass
class Metric:
    """A single metric."""

    name: str
    type: MetricType = MetricType.GAUGE
    value: float = 0.0
    labels: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    help_text: str = ""

    def __str__(self) -> str:
        """Format metric for display."""
        label_str = ""
        if self.labels:
            label_pairs = [f'{k}="{v}"' for k, v in self.labels.items()]
            label_str = "{" + ", ".join(label_pairs) + "}"
        return f"{self.name}{label_str} {self.value}"


@dataclass
class HistogramBucket:
    """A histogram bucket."""

    upper_bound: float
    count: int = 0


@dataclass
class Histogram(Metric):
    """A histogram metric with cumulative buckets."""

    buckets: list[HistogramBucket] = field(default_factory=list)
    sum: float = 0.0
    count: int = 0

    def observe(self, value: float) -> None:
        """Observe a value."""
        self.count += 1
        self.sum += value

        for bucket in self.buckets:
            if value <= bucket.upper_bound:
                bucket.count += 1

    def __post_init__(self) -> None:
        """Initialize histogram type."""
        self.type = MetricType.HISTOGRAM


# Scoring takes microseconds; buckets are in seconds
DEFAULT_DURATION_BUCKETS = (0.0001, 0.0005, 0.001, 0.005, 0.01, float("inf"))


class MetricsRegistry:
    """Process-wide registry for metrics."""

    _instance = None
    _lock = Lock()

    def __new__(cls) -> "MetricsRegistry":
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._metrics = {}
                    cls._instance._histograms = {}
                    cls._instance._update_lock = Lock()
        return cls._instance

    def register(self, metric: Metric) -> None:
        """Register a metric."""
        key = self._make_key(metric.name, metric.labels)
        self._metrics[key] = metric

        if isinstance(metric, Histogram):
            self._histograms[key] = metric

    def get(self, name: str, labels: dict[str, str] | None = None) -> Metric | None:
        """Get a metric."""
        key = self._make_key(name, labels or {})
        return self._metrics.get(key)

    def increment(
        self, name: str, value: float = 1.0, labels: dict[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""
        key = self._make_key(name, labels or {})
        with self._update_lock:
            metric = self._metrics.get(key)
            if metric is None:
                self.register(
                    Metric(
                        name=name,
                        type=MetricType.COUNTER,
                        value=value,
                        labels=labels or {},
                    )
                )
            else:
                metric.value += value
                metric.timestamp = datetime.now()

    def set(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """Set a gauge metric."""
        key = self._make_key(name, labels or {})
        with self._update_lock:
            metric = self._metrics.get(key)
            if metric is None:
                self.register(
                    Metric(
                        name=name,
                        type=MetricType.GAUGE,
                        value=value,
                        labels=labels or {},
                    )
                )
            else:
                metric.value = value
                metric.timestamp = datetime.now()

    def observe(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """Observe a value for a histogram."""
        key = self._make_key(name, labels or {})
        with self._update_lock:
            histogram = self._histograms.get(key)
            if histogram is None:
                histogram = Histogram(
                    name=name,
                    labels=labels or {},
                    buckets=[HistogramBucket(b) for b in DEFAULT_DURATION_BUCKETS],
                )
                self.register(histogram)
            histogram.observe(value)
            histogram.timestamp = datetime.now()

    def get_all(self) -> list[Metric]:
        """Get all registered metrics."""
        return list(self._metrics.values())

    def reset(self) -> None:
        """Reset all metrics."""
        self._metrics.clear()
        self._histograms.clear()

    def _make_key(self, name: str, labels: dict[str, str]) -> str:
        """Make a unique key for a metric."""
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"


# Global registry
registry = MetricsRegistry()


class MetricsCollector:
    """Collect metrics for issue scoring and the handlers around it."""

    def __init__(self, registry: MetricsRegistry = registry) -> None:
        """Initialize metrics collector.

        Args:
            registry: Metrics registry to use
        """
        self.registry = registry
        self._setup_default_metrics()

    def _setup_default_metrics(self) -> None:
        """Register the default metrics unless already present."""
        defaults = [
            Metric(
                name="civicscore_issues_scored",
                type=MetricType.COUNTER,
                help_text="Priority computations written back to issues",
            ),
            Metric(
                name="civicscore_issues_reported",
                type=MetricType.COUNTER,
                help_text="Issues created",
            ),
            Metric(
                name="civicscore_upvotes_recorded",
                type=MetricType.COUNTER,
                help_text="Upvotes accepted",
            ),
            Metric(
                name="civicscore_issues_recalculated",
                type=MetricType.COUNTER,
                help_text="Issues re-scored by bulk recalculation",
            ),
            Metric(
                name="civicscore_issues_by_level",
                type=MetricType.GAUGE,
                help_text="Stored issues per priority level",
            ),
        ]
        for metric in defaults:
            if self.registry.get(metric.name) is None:
                self.registry.register(metric)

        if self.registry.get("civicscore_scoring_duration_seconds") is None:
            self.registry.register(
                Histogram(
                    name="civicscore_scoring_duration_seconds",
                    help_text="Time spent scoring one issue",
                    buckets=[HistogramBucket(b) for b in DEFAULT_DURATION_BUCKETS],
                )
            )

    def increment_issues_scored(self, value: int = 1, level: str | None = None) -> None:
        """Increment issues scored counter."""
        labels = {"level": level} if level else None
        self.registry.increment("civicscore_issues_scored", value, labels)

    def increment_issues_reported(
        self, value: int = 1, category: str | None = None
    ) -> None:
        """Increment issues reported counter."""
        labels = {"category": category} if category else None
        self.registry.increment("civicscore_issues_reported", value, labels)

    def increment_upvotes_recorded(self, value: int = 1) -> None:
        """Increment upvotes counter."""
        self.registry.increment("civicscore_upvotes_recorded", value)

    def increment_issues_recalculated(self, value: int = 1) -> None:
        """Increment bulk-recalculated issues counter."""
        self.registry.increment("civicscore_issues_recalculated", value)

    def set_issues_by_level(self, counts: dict[str, int]) -> None:
        """Set the per-level issue gauges."""
        for level, count in counts.items():
            self.registry.set("civicscore_issues_by_level", count, {"level": level})

    def observe_scoring_duration(self, duration_seconds: float) -> None:
        """Observe how long one scoring call took."""
        self.registry.observe("civicscore_scoring_duration_seconds", duration_seconds)

    def get_summary(self) -> dict[str, float]:
        """Get summary of all metrics, summed across labels."""
        summary: dict[str, float] = {}
        for metric in self.registry.get_all():
            value = metric.count if isinstance(metric, Histogram) else metric.value
            summary[metric.name] = summary.get(metric.name, 0.0) + value
        return summary

    def export_prometheus(self) -> str:
        """Export metrics in Prometheus text format."""
        lines = []
        for metric in self.registry.get_all():
            if metric.help_text:
                lines.append(f"# HELP {metric.name} {metric.help_text}")
            lines.append(f"# TYPE {metric.name} {metric.type.value}")
            lines.append(str(metric))
        return "\n".join(lines)
