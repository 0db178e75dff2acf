"""Spec to index tuple extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from specindex.config import DEFAULT_PLATFORM
from specindex.models import IndexTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from specindex.spec import PackageSpec


def normalize_platform(platform: str | None, default_platform: str = DEFAULT_PLATFORM) -> str:
    """Return the platform, or the default when empty or absent."""
    if platform is None or platform == "":
        return default_platform
    return platform


def extract_tuples(
    specs: Iterable[PackageSpec],
    default_platform: str = DEFAULT_PLATFORM,
) -> list[IndexTuple]:
    """Build one IndexTuple per spec, in input order."""
    return [
        IndexTuple(spec.name, spec.version, normalize_platform(spec.platform, default_platform))
        for spec in specs
    ]
