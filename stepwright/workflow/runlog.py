"""Compact, storable summaries of workflow runs."""

from __future__ import annotations

import json
import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from stepwright.selectors.digest import DOMDigest
from stepwright.workflow.types import Command, StepResult, WorkflowExecutionResult

_QUERY_SELECTOR_RE = re.compile(r"querySelector(?:All)?\(\s*['\"]([^'\"]+)['\"]\s*\)")
_SAMPLE_LIMIT = 3
_SAMPLE_LENGTH = 100


@dataclass
class ExtractDigest:
    count: int
    samples: list[str] = field(default_factory=list)


@dataclass
class StepLog:
    n: int
    cmd: str
    ok: bool
    duration: float = 0.0
    why: str | None = None
    selector: str | None = None
    digest: ExtractDigest | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"n": self.n, "cmd": self.cmd, "ok": self.ok, "duration": self.duration}
        if self.why is not None:
            d["why"] = self.why
        if self.selector is not None:
            d["selector"] = self.selector
        if self.digest is not None:
            d["digest"] = {"count": self.digest.count, "samples": list(self.digest.samples)}
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "StepLog":
        digest = d.get("digest")
        return cls(
            n=int(d["n"]),
            cmd=d["cmd"],
            ok=bool(d["ok"]),
            duration=float(d.get("duration", 0.0)),
            why=d.get("why"),
            selector=d.get("selector"),
            digest=ExtractDigest(count=digest["count"], samples=list(digest.get("samples", [])))
            if digest
            else None,
        )


@dataclass
class RunLog:
    id: str
    timestamp: float
    url: str
    steps: list[StepLog] = field(default_factory=list)
    elapsed_ms: float = 0.0
    success: bool = True
    workflow_id: str | None = None
    failure_reason: str | None = None
    dom_digest: DOMDigest | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workflow_id": self.workflow_id,
            "timestamp": self.timestamp,
            "url": self.url,
            "steps": [s.to_dict() for s in self.steps],
            "elapsed_ms": self.elapsed_ms,
            "success": self.success,
            "failure_reason": self.failure_reason,
            "dom_digest": self.dom_digest.to_dict() if self.dom_digest else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RunLog":
        digest = d.get("dom_digest")
        return cls(
            id=d["id"],
            workflow_id=d.get("workflow_id"),
            timestamp=float(d.get("timestamp", 0.0)),
            url=d.get("url", ""),
            steps=[StepLog.from_dict(s) for s in d.get("steps", [])],
            elapsed_ms=float(d.get("elapsed_ms", 0.0)),
            success=bool(d.get("success", False)),
            failure_reason=d.get("failure_reason"),
            dom_digest=DOMDigest.from_dict(digest) if digest else None,
        )


def extract_selector(args: Any) -> str | None:
    """Pull the selector out of a ``querySelector``/``querySelectorAll`` call in a script."""
    if isinstance(args, dict):
        args = args.get("script") or args.get("code") or args.get("expression")
    if not isinstance(args, str):
        return None
    match = _QUERY_SELECTOR_RE.search(args)
    return match.group(1) if match else None


def summarize_output(output: str | None) -> ExtractDigest | None:
    """Digest of an evaluate step's output; ``None`` when it is not JSON."""
    if not output:
        return None
    try:
        data = json.loads(output)
    except ValueError:
        return None
    if isinstance(data, list):
        samples = [item if isinstance(item, str) else json.dumps(item) for item in data[:_SAMPLE_LIMIT]]
        return ExtractDigest(count=len(data), samples=samples)
    return ExtractDigest(count=1, samples=[output[:_SAMPLE_LENGTH]])


def _step_log(step: StepResult) -> StepLog:
    log = StepLog(n=step.step_number, cmd=step.command, ok=step.success, duration=step.duration_ms)
    if not step.success:
        log.why = step.error or "Failed"
    if step.command == Command.EVALUATE.value:
        log.selector = extract_selector(step.args)
        log.digest = summarize_output(step.output)
    return log


def failure_reason(steps: list[StepResult]) -> str | None:
    failed = [s for s in steps if not s.success]
    if not failed:
        return None
    return "; ".join(f"step {s.step_number} ({s.command}): {s.error or 'Failed'}" for s in failed)


def build_run_log(
    result: WorkflowExecutionResult,
    url: str = "",
    workflow_id: str | None = None,
    dom_digest: DOMDigest | None = None,
) -> RunLog:
    """Summarize an execution result. Never raises on odd step output."""
    return RunLog(
        id=uuid.uuid4().hex,
        workflow_id=workflow_id,
        timestamp=time.time(),
        url=url,
        steps=[_step_log(s) for s in result.steps],
        elapsed_ms=result.total_duration_ms,
        success=result.failed_steps == 0,
        failure_reason=failure_reason(result.steps),
        dom_digest=dom_digest,
    )


def format_run_log(run_log: RunLog) -> str:
    lines = [
        f"Run ID: {run_log.id}",
        f"URL: {run_log.url}",
        f"Success: {run_log.success}",
        f"Duration: {run_log.elapsed_ms:.0f}ms",
        "",
        "Steps:",
    ]
    for step in run_log.steps:
        status = "ok  " if step.ok else "FAIL"
        lines.append(f"  [{status}] Step {step.n}: {step.cmd}")
        if not step.ok and step.why:
            lines.append(f"         Error: {step.why}")
        if step.selector:
            lines.append(f"         Selector: {step.selector}")
        if step.digest:
            lines.append(f"         Found: {step.digest.count} items")
            if step.digest.samples:
                lines.append(f"         Samples: {', '.join(step.digest.samples[:2])}")
    if run_log.failure_reason:
        lines += ["", f"Failure: {run_log.failure_reason}"]
    return "\n".join(lines)
