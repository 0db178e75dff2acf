"""
Prometheus metrics for index update cycles.

Labels are limited to the index kind and the error class name, both of
which have a small fixed set of values. Package names, versions and paths
are never used as labels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge
from prometheus_client.registry import CollectorRegistry

if TYPE_CHECKING:
    from specindex.indexer import CycleReport


FORBIDDEN_LABELS = frozenset(
    {
        "name",
        "package",
        "version",
        "platform",
        "path",
        "file",
    }
)


class IndexMetrics:
    """
    Prometheus exporter for index update cycles.

    Usage:
        registry = CollectorRegistry()
        metrics = IndexMetrics(registry=registry)
        metrics.record_cycle(report)
        # generate_latest(registry) -> bytes for a textfile collector
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """
        Initialize metrics.

        Args:
            registry: Prometheus CollectorRegistry. A private one is created if None.
        """
        self._registry = registry or CollectorRegistry()

        self._cycles = Counter(
            "specindex_cycles",
            "Total update cycles run",
            registry=self._registry,
        )
        self._cycles_failed = Counter(
            "specindex_cycles_failed",
            "Update cycles where at least one index kind failed",
            registry=self._registry,
        )
        self._kind_failures = Counter(
            "specindex_kind_failures",
            "Index kind pipeline failures by error class",
            ["kind", "error"],
            registry=self._registry,
        )
        self._tuples = Gauge(
            "specindex_tuples",
            "Tuples in the most recently built index",
            ["kind"],
            registry=self._registry,
        )
        self._files_published = Counter(
            "specindex_files_published",
            "Artifacts moved into the live directory",
            registry=self._registry,
        )
        self._last_publish_timestamp = Gauge(
            "specindex_last_publish_timestamp_seconds",
            "Shared timestamp of the last publish batch",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Get the Prometheus CollectorRegistry."""
        return self._registry

    def record_cycle(self, report: CycleReport) -> None:
        """Update metrics from a finished cycle."""
        self._cycles.inc()
        if not report.ok:
            self._cycles_failed.inc()

        for result in report.kinds:
            if result.error is not None:
                self._kind_failures.labels(
                    kind=result.kind.value,
                    error=type(result.error).__name__,
                ).inc()
            elif result.tuples is not None:
                self._tuples.labels(kind=result.kind.value).set(result.tuples)

        if report.publish_error is not None:
            self._kind_failures.labels(
                kind=report.publish_error.kind.value if report.publish_error.kind else "unknown",
                error=type(report.publish_error).__name__,
            ).inc()

        if report.published:
            self._files_published.inc(len(report.published))
        if report.timestamp is not None:
            self._last_publish_timestamp.set(report.timestamp)


# Note: Counters are exported with _total suffix by prometheus_client
REQUIRED_METRIC_NAMES: frozenset[str] = frozenset(
    {
        "specindex_cycles_total",
        "specindex_cycles_failed_total",
        "specindex_files_published_total",
        "specindex_last_publish_timestamp_seconds",
    }
)
