"""Playwright-backed target."""

from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from stepwright.core.exceptions import TargetOperationError, TimeoutExceededError
from stepwright.target.base import BaseTarget

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DEFAULT_TIMEOUT_MS = 3000


def url_matcher(pattern: str) -> str | re.Pattern[str]:
    """
    Convert a workflow URL pattern into something ``Page.wait_for_url`` accepts.

    Patterns containing ``*`` are Playwright globs; anything else matches as
    a substring of the current URL.
    """
    if "*" in pattern:
        return pattern
    return re.compile(re.escape(pattern))


class PlaywrightTarget(BaseTarget):
    """Drives a live ``playwright.async_api.Page``."""

    def __init__(self, page: Page, default_timeout_ms: int = _DEFAULT_TIMEOUT_MS) -> None:
        self._page = page
        self._default_timeout = default_timeout_ms

    @property
    def page(self) -> Page:
        return self._page

    def _timeout(self, timeout: int | None) -> int:
        return self._default_timeout if timeout is None else timeout

    async def _guard(self, operation: str, awaitable: Awaitable[T], selector: str | None = None) -> T:
        """Await a Playwright call, translating its errors."""
        try:
            return await awaitable
        except PlaywrightTimeoutError as exc:
            target = f": {selector}" if selector else ""
            raise TimeoutExceededError(
                f"Timeout during {operation}{target} ({exc.message.splitlines()[0]})",
                operation=operation,
                selector=selector,
                original_error=exc,
            ) from exc
        except PlaywrightError as exc:
            target = f" ({selector})" if selector else ""
            raise TargetOperationError(
                f"Failed to {operation}: {exc.message.splitlines()[0]}{target}",
                operation=operation,
                selector=selector,
                original_error=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Page state
    # ------------------------------------------------------------------

    async def current_url(self) -> str:
        return self._page.url

    async def title(self) -> str:
        return await self._guard("read title", self._page.title())

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def navigate(self, url: str, wait_until: str = "load", timeout: int | None = None) -> None:
        logger.debug(f"goto {url} (wait_until={wait_until})")
        await self._guard(
            "navigate",
            self._page.goto(url, wait_until=wait_until, timeout=self._timeout(timeout)),
        )

    async def reload(self, wait_until: str = "load", timeout: int | None = None) -> None:
        await self._guard("reload", self._page.reload(wait_until=wait_until, timeout=self._timeout(timeout)))

    async def go_back(self, wait_until: str = "load", timeout: int | None = None) -> None:
        await self._guard("go back", self._page.go_back(wait_until=wait_until, timeout=self._timeout(timeout)))

    async def go_forward(self, wait_until: str = "load", timeout: int | None = None) -> None:
        await self._guard(
            "go forward", self._page.go_forward(wait_until=wait_until, timeout=self._timeout(timeout))
        )

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    async def click(
        self,
        selector: str,
        button: str = "left",
        click_count: int = 1,
        timeout: int | None = None,
    ) -> None:
        await self._guard(
            "click",
            self._page.click(selector, button=button, click_count=click_count, timeout=self._timeout(timeout)),
            selector,
        )

    async def type(
        self,
        selector: str,
        text: str,
        delay: int = 0,
        clear_first: bool = False,
        timeout: int | None = None,
    ) -> None:
        locator = self._page.locator(selector)
        if clear_first:
            # Triple click selects the whole value; Delete removes it.
            await self._guard("clear", locator.click(click_count=3, timeout=self._timeout(timeout)), selector)
            await self._guard("clear", self._page.keyboard.press("Delete"), selector)
        await self._guard(
            "type",
            locator.press_sequentially(text, delay=delay, timeout=self._timeout(timeout)),
            selector,
        )

    async def select(self, selector: str, value: str, timeout: int | None = None) -> None:
        await self._guard(
            "select", self._page.select_option(selector, value, timeout=self._timeout(timeout)), selector
        )

    async def hover(
        self,
        selector: str,
        position: dict[str, float] | None = None,
        timeout: int | None = None,
    ) -> None:
        await self._guard(
            "hover", self._page.hover(selector, position=position, timeout=self._timeout(timeout)), selector
        )

    async def fill(self, selector: str, value: str, timeout: int | None = None) -> None:
        await self._guard("fill", self._page.fill(selector, value, timeout=self._timeout(timeout)), selector)

    async def press(self, selector: str | None, key: str, timeout: int | None = None) -> None:
        if selector is None:
            await self._guard("press", self._page.keyboard.press(key))
            return
        await self._guard("press", self._page.press(selector, key, timeout=self._timeout(timeout)), selector)

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    async def wait_for_selector(self, selector: str, state: str = "visible", timeout: int | None = None) -> None:
        await self._guard(
            "wait for selector",
            self._page.wait_for_selector(selector, state=state, timeout=self._timeout(timeout)),
            selector,
        )

    async def wait_for_timeout(self, ms: float) -> None:
        await self._page.wait_for_timeout(ms)

    async def wait_for_url(self, pattern: str, timeout: int | None = None) -> None:
        await self._guard(
            "wait for url", self._page.wait_for_url(url_matcher(pattern), timeout=self._timeout(timeout))
        )

    # ------------------------------------------------------------------
    # Capture / scripting
    # ------------------------------------------------------------------

    async def screenshot(self, path: str, full_page: bool = True, image_format: str = "png") -> None:
        await self._guard("screenshot", self._page.screenshot(path=path, full_page=full_page, type=image_format))

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._guard("evaluate", self._page.evaluate(script))
        return await self._guard("evaluate", self._page.evaluate(script, arg))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query_count(self, selector: str) -> int:
        return await self._guard("count", self._page.locator(selector).count(), selector)

    async def query_text(self, selector: str) -> str:
        locator = self._page.locator(selector)
        if await self.query_count(selector) == 0:
            return ""
        text = await self._guard("read text", locator.first.text_content(timeout=self._default_timeout), selector)
        return (text or "").strip()

    async def query_texts(self, selector: str, limit: int) -> list[str]:
        locator = self._page.locator(selector)
        count = await self.query_count(selector)
        texts: list[str] = []
        for i in range(min(count, limit)):
            try:
                text = await locator.nth(i).inner_text(timeout=self._default_timeout)
            except PlaywrightError:
                text = ""
            texts.append(text.strip())
        return texts

    async def query_visible(self, selector: str) -> bool:
        if await self.query_count(selector) == 0:
            return False
        return await self._guard("check visibility", self._page.locator(selector).first.is_visible(), selector)

    async def query_input_value(self, selector: str) -> str:
        return await self._guard(
            "read input value",
            self._page.locator(selector).first.input_value(timeout=self._default_timeout),
            selector,
        )
