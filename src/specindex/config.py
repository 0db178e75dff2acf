"""Indexer configuration.

IndexerConfig is frozen (immutable) and is passed explicitly to every
component that touches the filesystem. There are no module-level paths.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PLATFORM = "ruby"
COMPRESSED_SUFFIX = ".gz"

STAGING_DIR_ENV_VAR = "SPECINDEX_STAGING_DIR"
LIVE_DIR_ENV_VAR = "SPECINDEX_LIVE_DIR"
DEFAULT_PLATFORM_ENV_VAR = "SPECINDEX_DEFAULT_PLATFORM"


class IndexKind(str, Enum):
    """Index kind.

    Declaration order is the processing and publish order.
    """

    FULL = "full"
    LATEST = "latest"
    PRERELEASE = "prerelease"


DEFAULT_FILE_NAMES: dict[IndexKind, str] = {
    IndexKind.FULL: "specs.4.8",
    IndexKind.LATEST: "latest_specs.4.8",
    IndexKind.PRERELEASE: "prerelease_specs.4.8",
}


@dataclass(frozen=True)
class IndexFile:
    """Raw and compressed locations of one index kind inside one directory."""

    kind: IndexKind
    raw: Path
    compressed: Path


class IndexerConfig(BaseModel):
    """Indexer configuration (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    staging_dir: Path = Field(description="Working directory for in-progress artifacts")
    live_dir: Path = Field(description="Published directory read by clients and mirrors")
    default_platform: str = Field(
        default=DEFAULT_PLATFORM,
        description="Platform recorded when a spec has none",
    )
    compression_level: int = Field(
        default=9,
        ge=1,
        le=9,
        description="gzip compression level for the .gz siblings",
    )
    file_names: dict[IndexKind, str] = Field(
        default_factory=lambda: dict(DEFAULT_FILE_NAMES),
        description="Raw file name per index kind",
    )

    @field_validator("default_platform")
    @classmethod
    def check_default_platform(cls, v: str) -> str:
        """Reject blank default platforms."""
        if not v or v.isspace():
            raise ValueError("default_platform must not be blank")
        return v

    @field_validator("file_names")
    @classmethod
    def check_file_names(cls, v: dict[IndexKind, str]) -> dict[IndexKind, str]:
        """Every kind needs a plain, distinct file name."""
        missing = [k.value for k in IndexKind if k not in v]
        if missing:
            raise ValueError(f"file_names missing kinds: {missing}")
        names = list(v.values())
        if len(set(names)) != len(names):
            raise ValueError("file_names must be distinct")
        for name in names:
            if not name or Path(name).name != name:
                raise ValueError(f"Invalid index file name: {name!r}")
        return v

    @model_validator(mode="after")
    def check_distinct_dirs(self) -> IndexerConfig:
        """Staging must not be the live directory; staged files are rewritten in place."""
        if self.staging_dir.resolve() == self.live_dir.resolve():
            msg = f"staging_dir and live_dir must differ: {self.live_dir}"
            raise ValueError(msg)
        return self

    @classmethod
    def from_env(cls) -> IndexerConfig:
        """Build a config from SPECINDEX_* environment variables.

        Raises:
            ValueError: If a required variable is unset.
        """
        staging = os.environ.get(STAGING_DIR_ENV_VAR)
        live = os.environ.get(LIVE_DIR_ENV_VAR)
        if not staging or not live:
            msg = f"{STAGING_DIR_ENV_VAR} and {LIVE_DIR_ENV_VAR} must both be set"
            raise ValueError(msg)
        platform = os.environ.get(DEFAULT_PLATFORM_ENV_VAR) or DEFAULT_PLATFORM
        return cls(
            staging_dir=Path(staging).expanduser(),
            live_dir=Path(live).expanduser(),
            default_platform=platform,
        )

    def staging_file(self, kind: IndexKind) -> IndexFile:
        """Staging locations for a kind."""
        return self._index_file(self.staging_dir, kind)

    def live_file(self, kind: IndexKind) -> IndexFile:
        """Live locations for a kind."""
        return self._index_file(self.live_dir, kind)

    def _index_file(self, directory: Path, kind: IndexKind) -> IndexFile:
        raw = directory / self.file_names[kind]
        return IndexFile(
            kind=kind,
            raw=raw,
            compressed=raw.with_name(raw.name + COMPRESSED_SUFFIX),
        )
