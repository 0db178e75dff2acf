"""Atomic publish of staged artifacts into the live directory.

Each file is moved with ``os.replace``, so a reader sees either the old
or the new complete file. The batch as a whole is not atomic: a reader
polling mid-publish can see a new full index next to a stale latest one.
All moved files get one shared access/modification time, captured once
at the start of the batch, which downstream consumers use to detect a
new generation.

A failed move stops the batch. Files already moved stay live with the
batch timestamp; the rest keep their previous content and timestamp.
There is no rollback: re-running the whole cycle converges because
merging is idempotent.

Staging and live directories must be on the same filesystem.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from specindex.config import IndexKind
from specindex.errors import IOMoveFailure

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from pathlib import Path

    from specindex.config import IndexerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishArtifact:
    """One staged file and its live destination."""

    kind: IndexKind
    source: Path
    destination: Path


@dataclass
class PublishResult:
    """Outcome of one publish batch.

    Attributes:
        timestamp_ns: Shared atime/mtime applied to every moved file.
        published: Destinations moved so far, in move order.
    """

    timestamp_ns: int
    published: list[Path] = field(default_factory=list)

    @property
    def timestamp(self) -> float:
        """Batch timestamp in seconds since the epoch."""
        return self.timestamp_ns / 1e9


def plan_publish(config: IndexerConfig, kinds: Iterable[IndexKind]) -> list[PublishArtifact]:
    """Artifacts for ``kinds`` in publish order.

    Order is fixed regardless of how ``kinds`` is ordered: full, latest,
    prerelease, each raw file before its compressed sibling.
    """
    wanted = set(kinds)
    plan: list[PublishArtifact] = []
    for kind in IndexKind:
        if kind not in wanted:
            continue
        staged = config.staging_file(kind)
        live = config.live_file(kind)
        plan.append(PublishArtifact(kind, staged.raw, live.raw))
        plan.append(PublishArtifact(kind, staged.compressed, live.compressed))
    return plan


class AtomicPublisher:
    """Moves staged artifacts into place and stamps them with one timestamp."""

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns) -> None:
        self._clock_ns = clock_ns

    def publish(
        self,
        artifacts: Sequence[PublishArtifact],
        timestamp_ns: int | None = None,
    ) -> PublishResult:
        """Move artifacts in the given order.

        Args:
            artifacts: Files to publish, usually from ``plan_publish``.
            timestamp_ns: Batch timestamp. Captured from the clock if None.

        Returns:
            PublishResult listing every moved destination.

        Raises:
            IOMoveFailure: On the first move or timestamp failure. The
                exception's ``published`` attribute lists the destinations
                already live, stamped with ``timestamp_ns``.
        """
        result = PublishResult(timestamp_ns=self._clock_ns() if timestamp_ns is None else timestamp_ns)
        stamp = (result.timestamp_ns, result.timestamp_ns)

        for artifact in artifacts:
            try:
                artifact.destination.parent.mkdir(parents=True, exist_ok=True)
                os.replace(artifact.source, artifact.destination)
            except OSError as e:
                raise self._failure("Failed to move artifact", artifact, result, e) from e

            result.published.append(artifact.destination)

            try:
                os.utime(artifact.destination, ns=stamp)
            except OSError as e:
                raise self._failure("Failed to set artifact timestamp", artifact, result, e) from e

            logger.debug(
                "Published artifact",
                extra={"kind": artifact.kind.value, "artifact": artifact.destination.name},
            )

        logger.info(
            "Publish batch complete",
            extra={"files": len(result.published), "timestamp": result.timestamp},
        )
        return result

    @staticmethod
    def _failure(
        message: str,
        artifact: PublishArtifact,
        result: PublishResult,
        cause: OSError,
    ) -> IOMoveFailure:
        logger.error(
            message,
            extra={
                "kind": artifact.kind.value,
                "artifact": artifact.destination.name,
                "moved": len(result.published),
                "error": str(cause),
            },
        )
        return IOMoveFailure(
            f"{message} {artifact.source} -> {artifact.destination}",
            kind=artifact.kind,
            path=artifact.destination,
            cause=cause,
            published=result.published,
            timestamp_ns=result.timestamp_ns,
        )
