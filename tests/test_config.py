"""Tests for IndexerConfig validation and path layout."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from specindex.config import (
    DEFAULT_FILE_NAMES,
    DEFAULT_PLATFORM_ENV_VAR,
    LIVE_DIR_ENV_VAR,
    STAGING_DIR_ENV_VAR,
    IndexerConfig,
    IndexKind,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestIndexerConfig:
    """Tests for IndexerConfig validation."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = IndexerConfig(staging_dir=tmp_path / "s", live_dir=tmp_path / "l")

        assert config.default_platform == "ruby"
        assert config.compression_level == 9
        assert config.file_names == DEFAULT_FILE_NAMES

    def test_string_paths_coerced(self) -> None:
        config = IndexerConfig(staging_dir="/tmp/staging", live_dir="/tmp/live")

        assert config.live_dir.name == "live"

    @pytest.mark.parametrize("platform", ["", "   "])
    def test_blank_platform_rejected(self, tmp_path: Path, platform: str) -> None:
        with pytest.raises(ValidationError, match="default_platform"):
            IndexerConfig(
                staging_dir=tmp_path / "staging", live_dir=tmp_path / "live", default_platform=platform
            )

    @pytest.mark.parametrize("level", [0, 10])
    def test_compression_level_bounds(self, tmp_path: Path, level: int) -> None:
        with pytest.raises(ValidationError):
            IndexerConfig(
                staging_dir=tmp_path / "staging", live_dir=tmp_path / "live", compression_level=level
            )

    def test_frozen(self, tmp_path: Path) -> None:
        config = IndexerConfig(staging_dir=tmp_path / "staging", live_dir=tmp_path / "live")

        with pytest.raises(ValidationError):
            config.default_platform = "java"  # type: ignore[misc]

    def test_unknown_field_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            IndexerConfig(
                staging_dir=tmp_path / "staging", live_dir=tmp_path / "live", lock_file="x",  # type: ignore[call-arg]
            )

    def test_file_names_must_cover_every_kind(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="missing kinds"):
            IndexerConfig(
                staging_dir=tmp_path / "staging",
                live_dir=tmp_path / "live",
                file_names={IndexKind.FULL: "specs", IndexKind.LATEST: "latest"},
            )

    def test_file_names_must_be_distinct(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="distinct"):
            IndexerConfig(
                staging_dir=tmp_path / "staging",
                live_dir=tmp_path / "live",
                file_names={kind: "specs" for kind in IndexKind},
            )

    def test_file_names_must_be_plain(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Invalid index file name"):
            IndexerConfig(
                staging_dir=tmp_path / "staging",
                live_dir=tmp_path / "live",
                file_names={
                    IndexKind.FULL: "../specs",
                    IndexKind.LATEST: "latest",
                    IndexKind.PRERELEASE: "prerelease",
                },
            )

    def test_same_directory_rejected(self, tmp_path: Path) -> None:
        """Live indices must only change through publish."""
        with pytest.raises(ValidationError, match="must differ"):
            IndexerConfig(staging_dir=tmp_path, live_dir=tmp_path)

    def test_aliased_directory_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="must differ"):
            IndexerConfig(
                staging_dir=tmp_path / "staging" / ".." / "live",
                live_dir=tmp_path / "live",
            )


class TestIndexFiles:
    """Tests for staging_file and live_file."""

    def test_live_layout(self, tmp_path: Path) -> None:
        config = IndexerConfig(staging_dir=tmp_path / "staging", live_dir=tmp_path / "live")

        live = config.live_file(IndexKind.LATEST)

        assert live.kind is IndexKind.LATEST
        assert live.raw == tmp_path / "live" / "latest_specs.4.8"
        assert live.compressed == tmp_path / "live" / "latest_specs.4.8.gz"

    def test_staging_layout(self, tmp_path: Path) -> None:
        config = IndexerConfig(staging_dir=tmp_path / "staging", live_dir=tmp_path / "live")

        staged = config.staging_file(IndexKind.FULL)

        assert staged.raw == tmp_path / "staging" / "specs.4.8"
        assert staged.compressed == tmp_path / "staging" / "specs.4.8.gz"

    def test_custom_file_names(self, tmp_path: Path) -> None:
        config = IndexerConfig(
            staging_dir=tmp_path / "staging",
            live_dir=tmp_path / "live",
            file_names={
                IndexKind.FULL: "specs.5",
                IndexKind.LATEST: "latest.5",
                IndexKind.PRERELEASE: "pre.5",
            },
        )

        assert config.live_file(IndexKind.PRERELEASE).compressed.name == "pre.5.gz"

    def test_kind_order(self) -> None:
        """Kinds iterate in processing order."""
        assert list(IndexKind) == [IndexKind.FULL, IndexKind.LATEST, IndexKind.PRERELEASE]


class TestFromEnv:
    """Tests for IndexerConfig.from_env."""

    def test_reads_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STAGING_DIR_ENV_VAR, str(tmp_path / "staging"))
        monkeypatch.setenv(LIVE_DIR_ENV_VAR, str(tmp_path / "live"))
        monkeypatch.setenv(DEFAULT_PLATFORM_ENV_VAR, "java")

        config = IndexerConfig.from_env()

        assert config.staging_dir == tmp_path / "staging"
        assert config.live_dir == tmp_path / "live"
        assert config.default_platform == "java"

    def test_platform_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STAGING_DIR_ENV_VAR, str(tmp_path / "staging"))
        monkeypatch.setenv(LIVE_DIR_ENV_VAR, str(tmp_path / "live"))
        monkeypatch.delenv(DEFAULT_PLATFORM_ENV_VAR, raising=False)

        assert IndexerConfig.from_env().default_platform == "ruby"

    def test_same_directory_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STAGING_DIR_ENV_VAR, str(tmp_path))
        monkeypatch.setenv(LIVE_DIR_ENV_VAR, str(tmp_path))

        with pytest.raises(ValueError, match="must differ"):
            IndexerConfig.from_env()

    def test_missing_directory_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STAGING_DIR_ENV_VAR, str(tmp_path))
        monkeypatch.delenv(LIVE_DIR_ENV_VAR, raising=False)

        with pytest.raises(ValueError, match=LIVE_DIR_ENV_VAR):
            IndexerConfig.from_env()
