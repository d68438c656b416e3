from stepwright.core.config import RankingWeights, StepwrightConfig, configure_logging
from stepwright.core.exceptions import (
    AssertionFailedError,
    InvalidSelectorError,
    StepArgumentError,
    StepwrightError,
    StrictModeAbortError,
    TargetOperationError,
    TimeoutExceededError,
    UnknownCommandError,
    UnresolvedVariableError,
    WorkflowFormatError,
    is_timeout_error,
)

__all__ = [
    "AssertionFailedError",
    "InvalidSelectorError",
    "RankingWeights",
    "StepArgumentError",
    "StepwrightConfig",
    "StepwrightError",
    "StrictModeAbortError",
    "TargetOperationError",
    "TimeoutExceededError",
    "UnknownCommandError",
    "UnresolvedVariableError",
    "WorkflowFormatError",
    "configure_logging",
    "is_timeout_error",
]
