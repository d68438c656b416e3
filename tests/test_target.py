"""Unit tests for PlaywrightTarget (AsyncMock page, no browser)."""

from __future__ import annotations

import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from stepwright.core.exceptions import TargetOperationError, TimeoutExceededError
from stepwright.target.page import PlaywrightTarget, url_matcher


def make_page(count: int = 1) -> AsyncMock:
    page = AsyncMock()
    page.url = "https://example.com/start"
    loc = AsyncMock()
    loc.count = AsyncMock(return_value=count)
    loc.first = AsyncMock()
    loc.first.text_content = AsyncMock(return_value="  Hello  ")
    loc.first.is_visible = AsyncMock(return_value=True)
    loc.first.input_value = AsyncMock(return_value="typed")
    loc.nth = MagicMock(return_value=AsyncMock(inner_text=AsyncMock(return_value=" row ")))
    page.locator = MagicMock(return_value=loc)
    page.keyboard = AsyncMock()
    return page


class TestPlaywrightTarget:
    def setup_method(self):
        self.page = make_page()
        self.target = PlaywrightTarget(self.page, default_timeout_ms=1500)

    # ------------------------------------------------------------------ navigation / interaction

    async def test_current_url(self):
        assert await self.target.current_url() == "https://example.com/start"

    async def test_navigate_uses_default_timeout(self):
        await self.target.navigate("https://example.com", wait_until="domcontentloaded")
        self.page.goto.assert_awaited_once_with("https://example.com", wait_until="domcontentloaded", timeout=1500)

    async def test_click_passes_options(self):
        await self.target.click("#go", button="right", click_count=2, timeout=200)
        self.page.click.assert_awaited_once_with("#go", button="right", click_count=2, timeout=200)

    async def test_type_clear_first(self):
        await self.target.type("#q", "cats", delay=10, clear_first=True)
        loc = self.page.locator.return_value
        loc.click.assert_awaited_once_with(click_count=3, timeout=1500)
        self.page.keyboard.press.assert_awaited_once_with("Delete")
        loc.press_sequentially.assert_awaited_once_with("cats", delay=10, timeout=1500)

    async def test_type_without_clear(self):
        await self.target.type("#q", "cats")
        loc = self.page.locator.return_value
        loc.click.assert_not_awaited()
        loc.press_sequentially.assert_awaited_once()

    async def test_global_press_uses_keyboard(self):
        await self.target.press(None, "Escape")
        self.page.keyboard.press.assert_awaited_once_with("Escape")
        self.page.press.assert_not_awaited()

    async def test_element_press(self):
        await self.target.press("#q", "Enter", timeout=100)
        self.page.press.assert_awaited_once_with("#q", "Enter", timeout=100)

    async def test_wait_for_url_substring_becomes_regex(self):
        await self.target.wait_for_url("/done")
        (pattern,), kwargs = self.page.wait_for_url.await_args
        assert isinstance(pattern, re.Pattern)
        assert kwargs["timeout"] == 1500

    async def test_evaluate_with_and_without_arg(self):
        self.page.evaluate = AsyncMock(return_value=3)
        assert await self.target.evaluate("1 + 2") == 3
        self.page.evaluate.assert_awaited_with("1 + 2")
        await self.target.evaluate("(x) => x", 5)
        self.page.evaluate.assert_awaited_with("(x) => x", 5)

    # ------------------------------------------------------------------ error translation

    async def test_timeout_translated(self):
        self.page.click = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 1500ms exceeded.\nCall log: ..."))
        with pytest.raises(TimeoutExceededError) as exc_info:
            await self.target.click("#missing")
        exc = exc_info.value
        assert exc.selector == "#missing"
        assert exc.operation == "click"
        assert "Timeout during click: #missing" in str(exc)
        assert "Call log" not in str(exc)

    async def test_other_errors_translated(self):
        self.page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        with pytest.raises(TargetOperationError) as exc_info:
            await self.target.navigate("https://nowhere.invalid")
        assert not isinstance(exc_info.value, TimeoutExceededError)
        assert str(exc_info.value) == "Failed to navigate: net::ERR_NAME_NOT_RESOLVED"

    # ------------------------------------------------------------------ queries

    async def test_query_text_trimmed(self):
        assert await self.target.query_text("h1") == "Hello"

    async def test_query_text_absent(self):
        target = PlaywrightTarget(make_page(count=0))
        assert await target.query_text("h1") == ""
        assert await target.query_visible("h1") is False

    async def test_query_texts_limited(self):
        target = PlaywrightTarget(make_page(count=5))
        assert await target.query_texts("li", 2) == ["row", "row"]

    async def test_query_input_value(self):
        assert await self.target.query_input_value("#q") == "typed"


class TestUrlMatcher:
    def test_glob_passed_through(self):
        assert url_matcher("**/checkout/*") == "**/checkout/*"

    def test_substring_is_escaped(self):
        pattern = url_matcher("example.com/a?b=1")
        assert pattern.search("https://example.com/a?b=1&c=2")
        assert not pattern.search("https://exampleXcom/a?b=1")
