"""Index tuple types."""

from __future__ import annotations

from typing import NamedTuple

from specindex.version import Version


class IndexTuple(NamedTuple):
    """(name, version, platform) triple, the unit of every index."""

    name: str
    version: Version
    platform: str

    @property
    def identity(self) -> tuple[str, str, str]:
        """Exact identity used for deduplication.

        Compares the raw version string, so ``1.0`` and ``1.0.0`` are
        distinct entries even though they order equal.
        """
        return (self.name, self.version.raw, self.platform)

    @property
    def prerelease(self) -> bool:
        return self.version.prerelease


# Deduplicated and sorted by canonical_key.
SpecsIndex = list[IndexTuple]


def canonical_key(t: IndexTuple) -> tuple[str, Version, str, str]:
    """Total order: name, version, platform, then raw version as tie-breaker."""
    return (t.name, t.version, t.platform, t.version.raw)
