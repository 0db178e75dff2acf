"""Index merge, dedupe and derivation of the latest and prerelease views.

All results are sorted by ``canonical_key`` so repeated runs over the same
input produce byte-identical artifacts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from specindex.config import IndexKind
from specindex.models import IndexTuple, SpecsIndex, canonical_key
from specindex.serializer import read_index

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_persisted(path: Path, kind: IndexKind | None = None) -> SpecsIndex:
    """Load the previously published index.

    Raises:
        IndexNotFound: If the file is absent. Indices are appended to,
            never bootstrapped here.
        IndexCorrupt: If decoding fails.
    """
    index = read_index(path, kind)
    logger.debug(
        "Loaded persisted index",
        extra={"kind": kind.value if kind else None, "tuples": len(index)},
    )
    return index


def merge(persisted: Iterable[IndexTuple], new_tuples: Iterable[IndexTuple]) -> SpecsIndex:
    """Concatenate, dedupe on the exact triple and sort canonically.

    Idempotent, and independent of the iteration order of ``new_tuples``.
    """
    unique: dict[tuple[str, str, str], IndexTuple] = {}
    for t in persisted:
        unique.setdefault(t.identity, t)
    for t in new_tuples:
        unique.setdefault(t.identity, t)
    return sorted(unique.values(), key=canonical_key)


def compact_latest(tuples: Iterable[IndexTuple]) -> SpecsIndex:
    """Keep the highest released version per (name, platform).

    Prerelease tuples are skipped. Within a group the first tuple in
    canonical order wins a version tie (``1.0`` beats ``1.0.0``).
    """
    ordered = sorted((t for t in tuples if not t.prerelease), key=canonical_key)

    best: dict[tuple[str, str], IndexTuple] = {}
    for t in ordered:
        group = (t.name, t.platform)
        current = best.get(group)
        if current is None or t.version > current.version:
            best[group] = t

    return sorted(best.values(), key=canonical_key)


def filter_prerelease(tuples: Iterable[IndexTuple]) -> SpecsIndex:
    """Keep only prerelease tuples, in input order."""
    return [t for t in tuples if t.prerelease]


def build_index(
    kind: IndexKind,
    persisted: Iterable[IndexTuple],
    new_tuples: Iterable[IndexTuple],
) -> SpecsIndex:
    """Merge and apply the derivation for ``kind``."""
    merged = merge(persisted, new_tuples)
    if kind is IndexKind.FULL:
        return merged
    if kind is IndexKind.LATEST:
        return compact_latest(merged)
    if kind is IndexKind.PRERELEASE:
        return filter_prerelease(merged)
    msg = f"Unknown index kind: {kind!r}"
    raise ValueError(msg)
