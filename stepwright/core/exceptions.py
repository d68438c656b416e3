"""Exception hierarchy for stepwright."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stepwright.workflow.types import WorkflowExecutionResult


class StepwrightError(Exception):
    """Base exception for all stepwright errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidSelectorError(StepwrightError):
    """Raised when a selector fails structural validation."""

    def __init__(self, selector: Any, message: str | None = None) -> None:
        super().__init__(message or f"Invalid selector: {selector!r}")
        self.selector = selector


class UnknownCommandError(StepwrightError):
    """Raised when a workflow step names a command that does not exist."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command: {command}")
        self.command = command


class WorkflowFormatError(StepwrightError):
    """Raised when a workflow document or step is structurally malformed."""


class StepArgumentError(StepwrightError):
    """Raised when a step's arguments do not fit its command."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command


class UnresolvedVariableError(StepwrightError):
    """Raised in strict-variable mode when ``${name}`` has no binding."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unresolved variable: ${{{name}}}")
        self.name = name


class TargetOperationError(StepwrightError):
    """Raised when an operation against the target fails.

    ``suggestions`` holds advisory selector fixes; they are rendered after
    the message so the recorded step error carries them.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        selector: str | None = None,
        original_error: BaseException | None = None,
        suggestions: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.selector = selector
        self.original_error = original_error
        self.suggestions = list(suggestions or [])

    def __str__(self) -> str:
        if not self.suggestions:
            return self.message
        lines = [self.message, "Suggestions:"]
        lines.extend(f"  - {s}" for s in self.suggestions)
        return "\n".join(lines)


class TimeoutExceededError(TargetOperationError):
    """A target operation did not complete within its timeout."""


class AssertionFailedError(StepwrightError):
    """Raised by the ``assert`` command; carries expected/actual values."""

    def __init__(self, message: str, expected: Any = None, actual: Any = None) -> None:
        super().__init__(message, {"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual


class StrictModeAbortError(StepwrightError):
    """Raised when a step fails under ``strict=True``.

    The partial result (including the failing step) is attached as
    ``result``.
    """

    def __init__(
        self,
        step_number: int,
        error: str,
        result: WorkflowExecutionResult | None = None,
    ) -> None:
        super().__init__(f"Workflow failed at step {step_number}: {error}")
        self.step_number = step_number
        self.error = error
        self.result = result


_TIMEOUT_MARKERS = ("timeout", "waiting failed")


def is_timeout_error(error: BaseException) -> bool:
    """Return True when ``error`` looks like a timeout from any target."""
    if isinstance(error, TimeoutExceededError):
        return True
    if type(error).__name__ == "TimeoutError":
        return True
    text = str(error).lower()
    return any(marker in text for marker in _TIMEOUT_MARKERS)
