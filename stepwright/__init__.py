from stepwright.core.config import StepwrightConfig
from stepwright.core.exceptions import (
    AssertionFailedError,
    InvalidSelectorError,
    StepwrightError,
    StrictModeAbortError,
    TargetOperationError,
    TimeoutExceededError,
    UnknownCommandError,
)
from stepwright.selectors import (
    DOMDigestCollector,
    SelectorDisambiguator,
    SelectorRanker,
    is_valid_selector,
    normalize_selector,
    suggest_selector_fix,
)
from stepwright.target import BaseTarget, PlaywrightTarget
from stepwright.workflow import (
    Checkpoint,
    Command,
    ExecutionOptions,
    RunLogStore,
    StepResult,
    WorkflowExecutionResult,
    WorkflowExecutor,
    build_run_log,
    load_workflow,
)

__all__ = [
    "StepwrightConfig",
    # Errors
    "AssertionFailedError",
    "InvalidSelectorError",
    "StepwrightError",
    "StrictModeAbortError",
    "TargetOperationError",
    "TimeoutExceededError",
    "UnknownCommandError",
    # Selectors
    "DOMDigestCollector",
    "SelectorDisambiguator",
    "SelectorRanker",
    "is_valid_selector",
    "normalize_selector",
    "suggest_selector_fix",
    # Target
    "BaseTarget",
    "PlaywrightTarget",
    # Workflows
    "Checkpoint",
    "Command",
    "ExecutionOptions",
    "RunLogStore",
    "StepResult",
    "WorkflowExecutionResult",
    "WorkflowExecutor",
    "build_run_log",
    "load_workflow",
]
