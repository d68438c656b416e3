"""Filesystem store for run logs."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from stepwright.workflow.runlog import RunLog

logger = logging.getLogger(__name__)


class RunLogStore:
    """
    Write-once JSON records of workflow runs.

    Directory layout::

        {directory}/
            {run_id}.json         # one RunLog per run
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory).expanduser()
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, run_id: str) -> Path:
        return self._dir / f"{run_id}.json"

    def save(self, run_log: RunLog) -> Path:
        """Persist a run log. Raises ``FileExistsError`` if the id is taken."""
        path = self._path(run_log.id)
        with open(path, "x", encoding="utf-8") as f:
            json.dump(run_log.to_dict(), f, indent=2)
        logger.info(f"Saved run log {run_log.id} to {path}")
        return path

    def load(self, run_id: str) -> RunLog | None:
        """Load a run log by id. Returns None if missing or unreadable."""
        path = self._path(run_id)
        try:
            return RunLog.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, KeyError, OSError) as exc:
            logger.warning(f"Skipping unreadable run log {path}: {exc}")
            return None

    def list_runs(self, workflow_id: str | None = None) -> list[RunLog]:
        """All stored runs, newest first, optionally for one workflow."""
        runs: list[RunLog] = []
        for path in self._dir.glob("*.json"):
            run_log = self.load(path.stem)
            if run_log is None:
                continue
            if workflow_id is None or run_log.workflow_id == workflow_id:
                runs.append(run_log)
        runs.sort(key=lambda r: r.timestamp, reverse=True)
        return runs

    def delete(self, run_id: str) -> bool:
        """Delete a run log. Returns True if it existed."""
        try:
            self._path(run_id).unlink()
        except FileNotFoundError:
            return False
        return True
