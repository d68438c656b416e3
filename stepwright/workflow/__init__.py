"""Workflow model, execution engine and run logs."""

from stepwright.workflow.executor import ExecutionOptions, WorkflowExecutor
from stepwright.workflow.loader import load_workflow, parse_workflow, validate_workflow
from stepwright.workflow.runlog import RunLog, StepLog, build_run_log, format_run_log
from stepwright.workflow.store import RunLogStore
from stepwright.workflow.types import (
    Checkpoint,
    Command,
    PageSnapshot,
    RunState,
    StepResult,
    WorkflowExecutionResult,
    WorkflowStep,
)
from stepwright.workflow.variables import parse_assignments, substitute

__all__ = [
    "Checkpoint",
    "Command",
    "ExecutionOptions",
    "PageSnapshot",
    "RunLog",
    "RunLogStore",
    "RunState",
    "StepLog",
    "StepResult",
    "WorkflowExecutionResult",
    "WorkflowExecutor",
    "WorkflowStep",
    "build_run_log",
    "format_run_log",
    "load_workflow",
    "parse_assignments",
    "parse_workflow",
    "substitute",
    "validate_workflow",
]
