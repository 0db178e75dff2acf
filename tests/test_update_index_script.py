"""Tests for scripts/update_index.py command line entry point."""

from __future__ import annotations

import logging
import sys

import orjson
import pytest

from scripts.update_index import main
from specindex.config import LIVE_DIR_ENV_VAR, STAGING_DIR_ENV_VAR, IndexerConfig, IndexKind
from specindex.serializer import read_index


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["update_index.py", *argv])
    return main()


class TestUpdateIndexScript:
    """Tests for main()."""

    def test_bootstrap_then_update(self, tmp_path, monkeypatch, capsys) -> None:
        staging = tmp_path / "staging"
        live = tmp_path / "live"
        snapshot = tmp_path / "snapshot.jsonl"
        snapshot.write_text(
            '{"name": "rack", "version": "2.2.8"}\n'
            '{"name": "rack", "version": "3.0.0.beta1"}\n'
        )
        report_path = tmp_path / "report.json"
        metrics_path = tmp_path / "specindex.prom"

        assert run(monkeypatch, "--bootstrap", "--staging", str(staging), "--live", str(live)) == 0
        assert "Bootstrapped 6 files" in capsys.readouterr().out

        code = run(
            monkeypatch,
            "--snapshot",
            str(snapshot),
            "--staging",
            str(staging),
            "--live",
            str(live),
            "--report",
            str(report_path),
            "--metrics-out",
            str(metrics_path),
        )

        assert code == 0
        config = IndexerConfig(staging_dir=staging, live_dir=live)
        assert [x.identity for x in read_index(config.live_file(IndexKind.PRERELEASE).raw)] == [
            ("rack", "3.0.0.beta1", "ruby")
        ]
        assert orjson.loads(report_path.read_bytes())["ok"] is True
        assert "specindex_cycles_total 1.0" in metrics_path.read_text()
        captured = capsys.readouterr()
        assert "Published: 6 files" in captured.out
        assert "Snapshot loaded" in captured.err
        assert "artifact=snapshot.jsonl" in captured.err

    def test_second_bootstrap_is_noop(self, tmp_path, monkeypatch, capsys) -> None:
        args = ("--bootstrap", "--staging", str(tmp_path / "s"), "--live", str(tmp_path / "l"))
        run(monkeypatch, *args)
        capsys.readouterr()

        assert run(monkeypatch, *args) == 0
        assert "nothing to bootstrap" in capsys.readouterr().out

    def test_missing_live_index_fails(self, tmp_path, monkeypatch, capsys) -> None:
        """Without bootstrap every kind fails and the exit code is 1."""
        snapshot = tmp_path / "snapshot.jsonl"
        snapshot.write_text('{"name": "a", "version": "1.0"}\n')

        code = run(
            monkeypatch,
            "--snapshot",
            str(snapshot),
            "--staging",
            str(tmp_path / "s"),
            "--live",
            str(tmp_path / "l"),
        )

        assert code == 1
        assert "FAILED" in capsys.readouterr().out

    def test_uses_environment(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv(STAGING_DIR_ENV_VAR, str(tmp_path / "s"))
        monkeypatch.setenv(LIVE_DIR_ENV_VAR, str(tmp_path / "l"))

        assert run(monkeypatch, "--bootstrap") == 0
        assert (tmp_path / "l" / "specs.4.8.gz").exists()

    def test_missing_directories(self, monkeypatch, capsys) -> None:
        monkeypatch.delenv(STAGING_DIR_ENV_VAR, raising=False)
        monkeypatch.delenv(LIVE_DIR_ENV_VAR, raising=False)

        assert run(monkeypatch, "--bootstrap") == 1
        assert "must both be set" in capsys.readouterr().err

    def test_snapshot_required(self, tmp_path, monkeypatch, capsys) -> None:
        code = run(monkeypatch, "--staging", str(tmp_path / "s"), "--live", str(tmp_path / "l"))

        assert code == 1
        assert "--snapshot is required" in capsys.readouterr().err

    def test_bad_snapshot(self, tmp_path, monkeypatch, capsys) -> None:
        snapshot = tmp_path / "snapshot.jsonl"
        snapshot.write_text('{"name": "a", "version": "not valid"}\n')

        code = run(
            monkeypatch,
            "--snapshot",
            str(snapshot),
            "--staging",
            str(tmp_path / "s"),
            "--live",
            str(tmp_path / "l"),
        )

        assert code == 1
        assert "cannot load snapshot" in capsys.readouterr().err
