"""Package spec boundary.

The snapshot provider hands the indexer an iterable of objects satisfying
``PackageSpec``. ``SpecRecord`` is the concrete implementation used for
JSONL snapshots and tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator

from specindex.version import Version, parse_version


@runtime_checkable
class PackageSpec(Protocol):
    """Read-only view of one published package version."""

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> Version: ...

    @property
    def platform(self) -> str | None: ...

    @property
    def prerelease(self) -> bool: ...


class SpecRecord(BaseModel):
    """One snapshot entry (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str = Field(min_length=1, description="Package name")
    version: Version = Field(description="Package version")
    platform: str | None = Field(default=None, description="Platform tag, None for default")

    @field_validator("version", mode="before")
    @classmethod
    def parse_version_field(cls, v: object) -> Version:
        """Parse version strings."""
        if isinstance(v, Version):
            return v
        if isinstance(v, str):
            return parse_version(v)
        raise ValueError(f"Cannot convert {type(v).__name__} to Version")

    @property
    def prerelease(self) -> bool:
        """True if the version is a prerelease."""
        return self.version.prerelease


def load_snapshot(path: Path) -> list[SpecRecord]:
    """Load a JSONL snapshot.

    Each non-blank line is an object with ``name``, ``version`` and an
    optional ``platform``.

    Args:
        path: Path to JSONL file.

    Returns:
        Records in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If a line is not valid JSON or not a valid record.
    """
    records: list[SpecRecord] = []
    with path.open("rb") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(SpecRecord.model_validate(orjson.loads(line)))
            except (orjson.JSONDecodeError, ValueError) as e:
                msg = f"{path}:{lineno}: invalid snapshot entry: {e}"
                raise ValueError(msg) from e
    return records
