"""Error taxonomy for index compaction and publishing.

Every error carries the index kind, the path involved and the underlying
cause so the scheduler can decide whether to re-run the cycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from specindex.config import IndexKind


class SpecIndexError(Exception):
    """Base exception for index operations."""

    def __init__(
        self,
        message: str,
        *,
        kind: IndexKind | None = None,
        path: Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.path = path
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.args[0] if self.args else self.__class__.__name__]
        if self.kind is not None:
            parts.append(f"kind={self.kind.value}")
        if self.path is not None:
            parts.append(f"path={self.path}")
        if self.cause is not None:
            parts.append(f"cause={self.cause!r}")
        return " ".join(parts)


class IndexNotFound(SpecIndexError):
    """Raised when a persisted index file is missing."""


class IndexCorrupt(SpecIndexError):
    """Raised when an index cannot be decoded or has an unknown schema version."""


class IOWriteFailure(SpecIndexError):
    """Raised when writing an artifact to the staging directory fails."""


class IOMoveFailure(SpecIndexError):
    """Raised when moving an artifact into the live directory fails.

    Attributes:
        published: Live destinations already moved before the failure.
        timestamp_ns: Batch timestamp applied to the moved destinations.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: IndexKind | None = None,
        path: Path | None = None,
        cause: BaseException | None = None,
        published: list[Path] | None = None,
        timestamp_ns: int | None = None,
    ) -> None:
        super().__init__(message, kind=kind, path=path, cause=cause)
        self.published = list(published or [])
        self.timestamp_ns = timestamp_ns


class CompressionFailure(SpecIndexError):
    """Raised when compressing an artifact fails."""
