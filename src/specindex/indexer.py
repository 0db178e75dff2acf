"""Index update cycle.

One cycle takes a snapshot of package specs and, for each index kind in
order (full, latest, prerelease):

1. loads the persisted index from the live directory,
2. merges in the snapshot tuples and applies the kind's derivation,
3. serializes into the staging directory,
4. writes the gzip sibling next to it.

A failure in one kind is recorded and logged, and the remaining kinds
still run. Every kind that produced artifacts is then published in a
single batch sharing one timestamp.

Cycles are not locked against each other. The caller must serialize
them; re-running a failed cycle is safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson

from specindex.compactor import build_index, load_persisted
from specindex.compressor import compress_file
from specindex.config import IndexKind
from specindex.errors import IOMoveFailure, SpecIndexError
from specindex.extractor import extract_tuples
from specindex.publisher import AtomicPublisher, PublishResult, plan_publish
from specindex.serializer import write_index

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from specindex.config import IndexerConfig
    from specindex.metrics import IndexMetrics
    from specindex.models import IndexTuple
    from specindex.spec import PackageSpec

logger = logging.getLogger(__name__)


@dataclass
class KindResult:
    """Build outcome for one index kind.

    Attributes:
        kind: Index kind.
        tuples: Tuples in the built index, None on failure.
        size_bytes: Raw artifact size, None on failure.
        error: Failure, None on success.
    """

    kind: IndexKind
    tuples: int | None = None
    size_bytes: int | None = None
    error: SpecIndexError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "tuples": self.tuples,
            "size_bytes": self.size_bytes,
            "error": _error_dict(self.error),
        }


@dataclass
class CycleReport:
    """Outcome of one update cycle.

    Attributes:
        specs: Number of specs in the snapshot.
        kinds: Per-kind build results, in processing order.
        published: Live paths moved in the publish batch.
        timestamp: Shared publish timestamp (seconds) of the moved files, None if
            nothing was published.
        publish_error: Move failure that stopped the batch, if any.
    """

    specs: int
    kinds: list[KindResult] = field(default_factory=list)
    published: list[Path] = field(default_factory=list)
    timestamp: float | None = None
    publish_error: IOMoveFailure | None = None

    @property
    def ok(self) -> bool:
        """True if every kind was built and published."""
        return self.publish_error is None and all(r.ok for r in self.kinds)

    @property
    def errors(self) -> list[SpecIndexError]:
        """All failures of the cycle."""
        errors: list[SpecIndexError] = [r.error for r in self.kinds if r.error is not None]
        if self.publish_error is not None:
            errors.append(self.publish_error)
        return errors

    def get(self, kind: IndexKind) -> KindResult | None:
        """Get the result for a kind."""
        for result in self.kinds:
            if result.kind is kind:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ok": self.ok,
            "specs": self.specs,
            "kinds": [r.to_dict() for r in self.kinds],
            "published": [str(p) for p in self.published],
            "timestamp": self.timestamp,
            "publish_error": _error_dict(self.publish_error),
        }


def _error_dict(error: SpecIndexError | None) -> dict[str, Any] | None:
    if error is None:
        return None
    return {
        "type": type(error).__name__,
        "message": str(error),
        "kind": error.kind.value if error.kind else None,
        "path": str(error.path) if error.path else None,
    }


def dump_report_json(report: CycleReport) -> bytes:
    """Dump a report to canonical JSON bytes (sorted keys)."""
    return orjson.dumps(
        report.to_dict(),
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
    )


class IndexUpdater:
    """Runs update cycles against one staging/live directory pair."""

    def __init__(
        self,
        config: IndexerConfig,
        *,
        publisher: AtomicPublisher | None = None,
        metrics: IndexMetrics | None = None,
    ) -> None:
        self._config = config
        self._publisher = publisher or AtomicPublisher()
        self._metrics = metrics

    @property
    def config(self) -> IndexerConfig:
        return self._config

    def run(self, specs: Iterable[PackageSpec]) -> CycleReport:
        """Run one cycle over a snapshot.

        Args:
            specs: Authoritative package specs. Consumed once.

        Returns:
            CycleReport. Failures are reported, not raised.
        """
        snapshot = list(specs)
        new_tuples = extract_tuples(snapshot, self._config.default_platform)
        report = CycleReport(specs=len(snapshot))

        logger.info("Index update started", extra={"specs": len(snapshot)})

        for kind in IndexKind:
            report.kinds.append(self._build_kind(kind, new_tuples))

        built = [r.kind for r in report.kinds if r.ok]
        if built:
            self._publish(built, report)

        if self._metrics is not None:
            self._metrics.record_cycle(report)

        if report.ok:
            logger.info(
                "Index update complete",
                extra={"files": len(report.published), "timestamp": report.timestamp},
            )
        else:
            logger.error(
                "Index update finished with errors",
                extra={
                    "failed": [type(e).__name__ for e in report.errors],
                    "files": len(report.published),
                },
            )
        return report

    def _build_kind(self, kind: IndexKind, new_tuples: list[IndexTuple]) -> KindResult:
        live = self._config.live_file(kind)
        staged = self._config.staging_file(kind)
        try:
            persisted = load_persisted(live.raw, kind)
            index = build_index(kind, persisted, new_tuples)
            size = write_index(index, staged.raw, kind)
            compress_file(staged.raw, staged.compressed, kind, level=self._config.compression_level)
        except SpecIndexError as e:
            logger.error(
                "Index build failed",
                extra={"kind": kind.value, "error": str(e)},
            )
            return KindResult(kind=kind, error=e)

        logger.info(
            "Index built",
            extra={
                "kind": kind.value,
                "persisted": len(persisted),
                "tuples": len(index),
                "size_bytes": size,
            },
        )
        return KindResult(kind=kind, tuples=len(index), size_bytes=size)

    def _publish(self, kinds: list[IndexKind], report: CycleReport) -> None:
        plan = plan_publish(self._config, kinds)
        try:
            result = self._publisher.publish(plan)
        except IOMoveFailure as e:
            report.publish_error = e
            report.published = list(e.published)
            if e.published and e.timestamp_ns is not None:
                report.timestamp = e.timestamp_ns / 1e9
            return
        report.published = list(result.published)
        report.timestamp = result.timestamp


def bootstrap(
    config: IndexerConfig,
    publisher: AtomicPublisher | None = None,
) -> PublishResult | None:
    """Publish empty indices for kinds missing from the live directory.

    Existing live indices are left untouched. Update cycles never call
    this; it is an explicit operator step for a new registry.

    Returns:
        PublishResult, or None if every kind already exists.

    Raises:
        IOWriteFailure: If a staged artifact cannot be written.
        CompressionFailure: If compression fails.
        IOMoveFailure: If publishing fails.
    """
    missing = [kind for kind in IndexKind if not config.live_file(kind).raw.exists()]
    if not missing:
        logger.info("Bootstrap skipped, all indices exist")
        return None

    for kind in missing:
        staged = config.staging_file(kind)
        write_index([], staged.raw, kind)
        compress_file(staged.raw, staged.compressed, kind, level=config.compression_level)

    logger.info("Bootstrapping indices", extra={"kinds": [k.value for k in missing]})
    return (publisher or AtomicPublisher()).publish(plan_publish(config, missing))
