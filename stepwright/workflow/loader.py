"""Load workflow documents (YAML or JSON) into step lists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from stepwright.core.exceptions import WorkflowFormatError
from stepwright.workflow.types import WorkflowStep

logger = logging.getLogger(__name__)


def parse_workflow(text: str) -> list[WorkflowStep]:
    """
    Parse a workflow document.

    The document is a list of single-key mappings; a lone mapping is treated
    as a one-step workflow. JSON parses too, being a YAML subset.
    """
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkflowFormatError(f"Failed to parse workflow: {exc}") from exc
    return validate_workflow(doc)


def load_workflow(path: str | Path) -> list[WorkflowStep]:
    path = Path(path)
    logger.info(f"Loading workflow from {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkflowFormatError(f"Cannot read workflow file {str(path)!r}: {exc}") from exc
    return parse_workflow(text)


def validate_workflow(doc: Any) -> list[WorkflowStep]:
    """
    Check every step up front and return the parsed steps.

    Raises ``WorkflowFormatError`` or ``UnknownCommandError`` naming the
    first offending step.
    """
    if doc is None:
        raise WorkflowFormatError("Workflow must contain at least one step")
    raw_steps = doc if isinstance(doc, list) else [doc]
    if not raw_steps:
        raise WorkflowFormatError("Workflow must contain at least one step")

    steps: list[WorkflowStep] = []
    for number, raw in enumerate(raw_steps, start=1):
        try:
            steps.append(WorkflowStep.from_mapping(raw))
        except WorkflowFormatError as exc:
            raise WorkflowFormatError(f"Step {number}: {exc.message}") from exc
    return steps
