"""Workflow data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from stepwright.core.exceptions import UnknownCommandError, WorkflowFormatError


class Command(str, Enum):
    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE = "type"
    WAIT = "wait"
    SCREENSHOT = "screenshot"
    EVALUATE = "evaluate"
    SCROLL = "scroll"
    SELECT = "select"
    HOVER = "hover"
    FILL = "fill"
    PRESS = "press"
    ASSERT = "assert"
    CHECKPOINT = "checkpoint"
    RELOAD = "reload"
    BACK = "back"
    FORWARD = "forward"


COMMAND_ALIASES: dict[str, Command] = {
    "goto": Command.NAVIGATE,
    "eval": Command.EVALUATE,
    "refresh": Command.RELOAD,
}


def resolve_command(name: str) -> Command:
    """Map a workflow command name (or alias) to its ``Command``."""
    if name in COMMAND_ALIASES:
        return COMMAND_ALIASES[name]
    try:
        return Command(name)
    except ValueError:
        raise UnknownCommandError(name) from None


class RunState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class WorkflowStep:
    """One command plus its raw argument payload (string shorthand or mapping)."""

    command: Command
    args: Any = None
    name: str = ""  # command name as written, alias included

    @classmethod
    def from_mapping(cls, raw: Any) -> "WorkflowStep":
        """Build a step from ``{command: args}``; exactly one key allowed."""
        if isinstance(raw, WorkflowStep):
            return raw
        if isinstance(raw, str):
            # Bare command with no arguments, e.g. "- reload"
            return cls(command=resolve_command(raw), args=None, name=raw)
        if not isinstance(raw, Mapping):
            raise WorkflowFormatError(f"Step must be a mapping, got {type(raw).__name__}")
        if len(raw) != 1:
            keys = ", ".join(str(k) for k in raw) or "none"
            raise WorkflowFormatError(f"Step must contain exactly one command, got: {keys}")
        ((name, args),) = raw.items()
        name = str(name)
        return cls(command=resolve_command(name), args=args, name=name)


@dataclass(frozen=True)
class PageSnapshot:
    url: str
    title: str
    timestamp: str  # ISO-8601, UTC


@dataclass(frozen=True)
class Checkpoint:
    id: str
    page_state: PageSnapshot
    step_number: int
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "page_state": {
                "url": self.page_state.url,
                "title": self.page_state.title,
                "timestamp": self.page_state.timestamp,
            },
            "step_number": self.step_number,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Checkpoint":
        state = d.get("page_state") or {}
        return cls(
            id=d["id"],
            name=d.get("name"),
            page_state=PageSnapshot(
                url=state.get("url", ""),
                title=state.get("title", ""),
                timestamp=state.get("timestamp", ""),
            ),
            step_number=int(d["step_number"]),
        )


@dataclass(frozen=True)
class StepResult:
    step_number: int  # 1-based
    command: str
    args: Any
    success: bool
    output: str | None = None
    error: str | None = None
    duration_ms: float = 0.0
    checkpoint: Checkpoint | None = None


@dataclass
class WorkflowExecutionResult:
    success: bool
    total_steps: int
    successful_steps: int
    failed_steps: int
    steps: list[StepResult] = field(default_factory=list)
    total_duration_ms: float = 0.0
    checkpoints: list[Checkpoint] = field(default_factory=list)
    state: RunState = RunState.COMPLETED

    @property
    def aborted(self) -> bool:
        return self.state == RunState.ABORTED

    def checkpoint(self, name: str) -> Checkpoint | None:
        """Look up a checkpoint by name (first match)."""
        for cp in self.checkpoints:
            if cp.name == name:
                return cp
        return None

    def failures(self) -> list[StepResult]:
        return [s for s in self.steps if not s.success]
