"""Abstract automation target."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseTarget(ABC):
    """
    The single capability the workflow engine and selector components drive.

    Every operation either completes or raises. Implementations translate
    their own timeout failures into ``TimeoutExceededError`` and any other
    failure into ``TargetOperationError``. Timeouts are in milliseconds.
    """

    # ------------------------------------------------------------------
    # Page state
    # ------------------------------------------------------------------

    @abstractmethod
    async def current_url(self) -> str: ...

    @abstractmethod
    async def title(self) -> str: ...

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @abstractmethod
    async def navigate(self, url: str, wait_until: str = "load", timeout: int | None = None) -> None: ...

    @abstractmethod
    async def reload(self, wait_until: str = "load", timeout: int | None = None) -> None: ...

    @abstractmethod
    async def go_back(self, wait_until: str = "load", timeout: int | None = None) -> None: ...

    @abstractmethod
    async def go_forward(self, wait_until: str = "load", timeout: int | None = None) -> None: ...

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    @abstractmethod
    async def click(
        self,
        selector: str,
        button: str = "left",
        click_count: int = 1,
        timeout: int | None = None,
    ) -> None: ...

    @abstractmethod
    async def type(
        self,
        selector: str,
        text: str,
        delay: int = 0,
        clear_first: bool = False,
        timeout: int | None = None,
    ) -> None: ...

    @abstractmethod
    async def select(self, selector: str, value: str, timeout: int | None = None) -> None: ...

    @abstractmethod
    async def hover(
        self,
        selector: str,
        position: dict[str, float] | None = None,
        timeout: int | None = None,
    ) -> None: ...

    @abstractmethod
    async def fill(self, selector: str, value: str, timeout: int | None = None) -> None: ...

    @abstractmethod
    async def press(self, selector: str | None, key: str, timeout: int | None = None) -> None:
        """Press ``key`` on ``selector``, or globally when ``selector`` is None."""

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    @abstractmethod
    async def wait_for_selector(self, selector: str, state: str = "visible", timeout: int | None = None) -> None: ...

    @abstractmethod
    async def wait_for_timeout(self, ms: float) -> None: ...

    @abstractmethod
    async def wait_for_url(self, pattern: str, timeout: int | None = None) -> None: ...

    # ------------------------------------------------------------------
    # Capture / scripting
    # ------------------------------------------------------------------

    @abstractmethod
    async def screenshot(self, path: str, full_page: bool = True, image_format: str = "png") -> None: ...

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    # ------------------------------------------------------------------
    # Queries (read-only)
    # ------------------------------------------------------------------

    @abstractmethod
    async def query_count(self, selector: str) -> int: ...

    @abstractmethod
    async def query_text(self, selector: str) -> str:
        """Trimmed text content of the first match ("" when absent)."""

    @abstractmethod
    async def query_texts(self, selector: str, limit: int) -> list[str]:
        """Visible text of up to ``limit`` matches, in document order."""

    @abstractmethod
    async def query_visible(self, selector: str) -> bool: ...

    @abstractmethod
    async def query_input_value(self, selector: str) -> str: ...
