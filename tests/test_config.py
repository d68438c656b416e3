"""Unit tests for configuration and the error taxonomy."""

from __future__ import annotations

import asyncio

import pytest

from stepwright.core.config import RankingWeights, StepwrightConfig
from stepwright.core.exceptions import (
    AssertionFailedError,
    StepArgumentError,
    StrictModeAbortError,
    TargetOperationError,
    TimeoutExceededError,
    is_timeout_error,
)


class TestStepwrightConfig:
    def test_defaults(self, monkeypatch):
        for name in (
            "STEPWRIGHT_DEFAULT_TIMEOUT_MS",
            "STEPWRIGHT_STEP_DELAY_MS",
            "STEPWRIGHT_HEADLESS",
            "STEPWRIGHT_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)
        config = StepwrightConfig()
        assert config.default_timeout_ms == 3000
        assert config.step_delay_ms == 100
        assert config.headless is True
        assert config.log_level == "INFO"
        assert config.ranking == RankingWeights()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STEPWRIGHT_DEFAULT_TIMEOUT_MS", "5000")
        monkeypatch.setenv("STEPWRIGHT_STEP_DELAY_MS", "0")
        monkeypatch.setenv("STEPWRIGHT_HEADLESS", "false")
        monkeypatch.setenv("STEPWRIGHT_RUN_LOG_DIR", "/tmp/stepwright-logs")
        config = StepwrightConfig.from_env()
        assert config.default_timeout_ms == 5000
        assert config.step_delay_ms == 0
        assert config.headless is False
        assert config.run_log_dir == "/tmp/stepwright-logs"

    def test_validate_rejects_negative_timings(self):
        with pytest.raises(ValueError, match="step_delay_ms"):
            StepwrightConfig(step_delay_ms=-1).validate()
        with pytest.raises(ValueError, match="default_timeout_ms"):
            StepwrightConfig(default_timeout_ms=-5).validate()

    def test_validate_rejects_unknown_log_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            StepwrightConfig(log_level="CHATTY").validate()

    def test_validate_accepts_defaults(self):
        StepwrightConfig(step_delay_ms=0, default_timeout_ms=3000, log_level="debug").validate()


class TestExceptions:
    def test_suggestions_rendered_after_message(self):
        exc = TargetOperationError("Timeout during click: #a", selector="#a", suggestions=["Check the selector"])
        assert str(exc) == "Timeout during click: #a\nSuggestions:\n  - Check the selector"
        assert exc.message == "Timeout during click: #a"

    def test_timeout_is_a_target_error(self):
        assert issubclass(TimeoutExceededError, TargetOperationError)

    def test_is_timeout_error(self):
        assert is_timeout_error(TimeoutExceededError("slow"))
        assert is_timeout_error(asyncio.TimeoutError())
        assert is_timeout_error(RuntimeError("Waiting failed: 3000ms exceeded"))
        assert not is_timeout_error(RuntimeError("boom"))

    def test_assertion_carries_expected_actual(self):
        exc = AssertionFailedError("mismatch", expected=2, actual=3)
        assert exc.details == {"expected": 2, "actual": 3}

    def test_step_argument_error_prefixed_with_command(self):
        assert str(StepArgumentError("fill", "a value is required")) == "fill: a value is required"

    def test_strict_abort_message(self):
        exc = StrictModeAbortError(4, "Element not found: h1")
        assert str(exc) == "Workflow failed at step 4: Element not found: h1"
        assert exc.result is None
