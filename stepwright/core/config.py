"""Configuration management for stepwright."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field


@dataclass
class RankingWeights:
    """Tunable constants for selector confidence scoring."""

    base: float = 0.5
    many_matches: int = 10
    many_matches_bonus: float = 0.2
    some_matches: int = 5
    some_matches_bonus: float = 0.1
    qualified_bonus: float = 0.1
    generic_tag_penalty: float = 0.3
    container_bonus: float = 0.1
    uniform_text_bonus: float = 0.1
    uniform_variance_ratio: float = 0.3
    generic_tags: tuple[str, ...] = ("div", "span")
    container_keywords: tuple[str, ...] = ("item", "card", "row", "result")


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, "true" if default else "false").lower() in ("1", "true", "yes")


@dataclass
class StepwrightConfig:
    """Global configuration.

    All values can be overridden via environment variables with the
    ``STEPWRIGHT_`` prefix, e.g. ``STEPWRIGHT_STEP_DELAY_MS=0``.
    """

    # Execution
    default_timeout_ms: int = field(
        default_factory=lambda: _env_int("STEPWRIGHT_DEFAULT_TIMEOUT_MS", 3000)
    )
    step_delay_ms: int = field(
        default_factory=lambda: _env_int("STEPWRIGHT_STEP_DELAY_MS", 100)
    )

    # Browser (CLI only)
    headless: bool = field(
        default_factory=lambda: _env_bool("STEPWRIGHT_HEADLESS", True)
    )

    # Storage
    run_log_dir: str = field(
        default_factory=lambda: os.environ.get(
            "STEPWRIGHT_RUN_LOG_DIR",
            os.path.join(os.path.expanduser("~"), ".stepwright", "run-logs"),
        )
    )

    # Logging
    log_level: str = field(
        default_factory=lambda: os.environ.get("STEPWRIGHT_LOG_LEVEL", "INFO")
    )

    ranking: RankingWeights = field(default_factory=RankingWeights)

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If a timing value is negative or the log level is unknown.
        """
        if self.default_timeout_ms < 0:
            raise ValueError(f"default_timeout_ms must be >= 0, got {self.default_timeout_ms}")
        if self.step_delay_ms < 0:
            raise ValueError(f"step_delay_ms must be >= 0, got {self.step_delay_ms}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "StepwrightConfig":
        """Create a config instance from environment variables."""
        return cls()


def configure_logging(level: str = "INFO") -> None:
    """Attach a root handler. Intended for the CLI; the library never calls it."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
