"""Unit tests for the command line (no browser: dry runs and stored logs only)."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

from stepwright.cli import build_parser, main
from stepwright.workflow.runlog import RunLog, StepLog
from stepwright.workflow.store import RunLogStore


class TestParser:
    def test_run_defaults(self):
        args = build_parser().parse_args(["run", "wf.yml"])
        assert args.strict is False
        assert args.headless is None
        assert args.var == []
        assert args.timeout is None

    def test_run_flags(self):
        args = build_parser().parse_args(
            ["run", "wf.yml", "--strict", "--headed", "--var", "A=1", "--var", "B=2", "--timeout", "800", "--save-log"]
        )
        assert args.strict is True
        assert args.headless is False
        assert args.var == ["A=1", "B=2"]
        assert args.timeout == 800
        assert args.save_log is True

    def test_strict_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run", "wf.yml", "--strict", "--continue-on-error"])


class TestMain:
    def setup_method(self):
        self.tmpdir = tempfile.mkdtemp()

    def _write(self, name: str, text: str) -> str:
        path = os.path.join(self.tmpdir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_dry_run_prints_plan(self, capsys):
        path = self._write("wf.yml", "- navigate: https://example.com\n- click: '#go'\n")
        assert main(["run", path, "--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "Workflow is valid (2 steps)" in out
        assert "2. click: '#go'" in out

    def test_shipped_example_is_valid(self, capsys):
        path = Path(__file__).resolve().parents[1] / "examples" / "search.yml"
        assert main(["run", str(path), "--dry-run"]) == 0
        assert "Workflow is valid (7 steps)" in capsys.readouterr().out

    def test_invalid_workflow_exits_nonzero(self, capsys):
        path = self._write("bad.yml", "- teleport: mars\n")
        assert main(["run", path, "--dry-run"]) == 1
        assert "Unknown command: teleport" in capsys.readouterr().err

    def test_logs_empty(self, capsys, monkeypatch):
        monkeypatch.setenv("STEPWRIGHT_RUN_LOG_DIR", self.tmpdir)
        assert main(["logs"]) == 0
        assert "No run logs found" in capsys.readouterr().out

    def test_logs_lists_and_shows(self, capsys, monkeypatch):
        monkeypatch.setenv("STEPWRIGHT_RUN_LOG_DIR", self.tmpdir)
        RunLogStore(self.tmpdir).save(
            RunLog(
                id="abc123",
                workflow_id="search",
                timestamp=1_700_000_000.0,
                url="https://example.com",
                steps=[StepLog(n=1, cmd="navigate", ok=True)],
            )
        )
        assert main(["logs", "--workflow", "search"]) == 0
        assert "abc123" in capsys.readouterr().out
        assert main(["logs", "--show", "1"]) == 0
        assert "Run ID: abc123" in capsys.readouterr().out

    def test_bad_config_exits_two(self, monkeypatch):
        monkeypatch.setenv("STEPWRIGHT_STEP_DELAY_MS", "-1")
        assert main(["logs"]) == 2
