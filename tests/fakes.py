"""In-memory target used by the unit tests (no browser)."""

from __future__ import annotations

from typing import Any, Callable

from stepwright.core.exceptions import TimeoutExceededError
from stepwright.target.base import BaseTarget


class FakeTarget(BaseTarget):
    """
    A page reduced to ``selector -> [texts]``.

    A selector "matches" exactly the number of texts registered for it.
    Interactions against an unregistered selector time out the way a real
    browser would. ``failures`` forces an operation to raise.
    """

    def __init__(
        self,
        url: str = "about:blank",
        title: str = "",
        elements: dict[str, list[str]] | None = None,
    ) -> None:
        self.url = url
        self.page_title = title
        self.elements: dict[str, list[str]] = dict(elements or {})
        self.hidden: set[str] = set()
        self.values: dict[str, str] = {}
        self.on_navigate: dict[str, list[str]] = {}  # elements that appear after navigation
        self.evaluate_result: Any = None
        self.evaluate_fn: Callable[[str, Any], Any] | None = None
        self.failures: dict[str, BaseException] = {}
        self.calls: list[tuple[str, tuple, dict]] = []
        self.waited_ms: list[float] = []

    # ------------------------------------------------------------------ helpers

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        if name in self.failures:
            raise self.failures[name]

    def _require(self, operation: str, selector: str) -> None:
        if not self.elements.get(selector):
            raise TimeoutExceededError(
                f"Timeout 3000ms exceeded during {operation}: waiting for {selector}",
                operation=operation,
                selector=selector,
            )

    def calls_to(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    # ------------------------------------------------------------------ page state

    async def current_url(self) -> str:
        return self.url

    async def title(self) -> str:
        return self.page_title

    # ------------------------------------------------------------------ navigation

    async def navigate(self, url: str, wait_until: str = "load", timeout: int | None = None) -> None:
        self._record("navigate", url, wait_until=wait_until, timeout=timeout)
        self.url = url
        self.elements.update(self.on_navigate)

    async def reload(self, wait_until: str = "load", timeout: int | None = None) -> None:
        self._record("reload", wait_until=wait_until, timeout=timeout)

    async def go_back(self, wait_until: str = "load", timeout: int | None = None) -> None:
        self._record("go_back", wait_until=wait_until, timeout=timeout)

    async def go_forward(self, wait_until: str = "load", timeout: int | None = None) -> None:
        self._record("go_forward", wait_until=wait_until, timeout=timeout)

    # ------------------------------------------------------------------ interaction

    async def click(self, selector, button="left", click_count=1, timeout=None) -> None:
        self._record("click", selector, button=button, click_count=click_count, timeout=timeout)
        self._require("click", selector)

    async def type(self, selector, text, delay=0, clear_first=False, timeout=None) -> None:
        self._record("type", selector, text, delay=delay, clear_first=clear_first, timeout=timeout)
        self._require("type", selector)
        current = "" if clear_first else self.values.get(selector, "")
        self.values[selector] = current + text

    async def select(self, selector, value, timeout=None) -> None:
        self._record("select", selector, value, timeout=timeout)
        self._require("select", selector)
        self.values[selector] = value

    async def hover(self, selector, position=None, timeout=None) -> None:
        self._record("hover", selector, position=position, timeout=timeout)
        self._require("hover", selector)

    async def fill(self, selector, value, timeout=None) -> None:
        self._record("fill", selector, value, timeout=timeout)
        self._require("fill", selector)
        self.values[selector] = value

    async def press(self, selector, key, timeout=None) -> None:
        self._record("press", selector, key, timeout=timeout)
        if selector is not None:
            self._require("press", selector)

    # ------------------------------------------------------------------ waiting

    async def wait_for_selector(self, selector, state="visible", timeout=None) -> None:
        self._record("wait_for_selector", selector, state=state, timeout=timeout)
        present = bool(self.elements.get(selector))
        if state in ("visible", "attached") and present and selector not in self.hidden:
            return
        if state in ("hidden", "detached") and (not present or selector in self.hidden):
            return
        raise TimeoutExceededError(
            f"Timeout {timeout}ms exceeded waiting for {selector} to be {state}",
            operation="wait for selector",
            selector=selector,
        )

    async def wait_for_timeout(self, ms: float) -> None:
        self.waited_ms.append(ms)

    async def wait_for_url(self, pattern: str, timeout: int | None = None) -> None:
        self._record("wait_for_url", pattern, timeout=timeout)
        if pattern not in self.url:
            raise TimeoutExceededError(f"Timeout {timeout}ms exceeded waiting for URL {pattern}")

    # ------------------------------------------------------------------ capture / scripting

    async def screenshot(self, path, full_page=True, image_format="png") -> None:
        self._record("screenshot", path, full_page=full_page, image_format=image_format)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self._record("evaluate", script, arg)
        if self.evaluate_fn is not None:
            return self.evaluate_fn(script, arg)
        return self.evaluate_result

    # ------------------------------------------------------------------ queries

    async def query_count(self, selector: str) -> int:
        return len(self.elements.get(selector, []))

    async def query_text(self, selector: str) -> str:
        texts = self.elements.get(selector, [])
        return texts[0].strip() if texts else ""

    async def query_texts(self, selector: str, limit: int) -> list[str]:
        return [t.strip() for t in self.elements.get(selector, [])[:limit]]

    async def query_visible(self, selector: str) -> bool:
        return bool(self.elements.get(selector)) and selector not in self.hidden

    async def query_input_value(self, selector: str) -> str:
        return self.values.get(selector, "")
