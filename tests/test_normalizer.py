"""Unit tests for selector normalization, validation and fix suggestions."""

from __future__ import annotations

import pytest

from stepwright.selectors.normalizer import (
    format_selector_for_error,
    is_valid_selector,
    looks_like_selector_error,
    normalize_selector,
    suggest_selector_fix,
)

EQUIVALENT_QUOTINGS = [
    "input[type=search]",
    "input[type='search']",
    'input[type="search"]',
    "input[type=\\'search\\']",
]


class TestNormalizeSelector:
    @pytest.mark.parametrize("selector", EQUIVALENT_QUOTINGS)
    def test_all_quotings_converge(self, selector):
        assert normalize_selector(selector) == 'input[type="search"]'

    @pytest.mark.parametrize("selector", EQUIVALENT_QUOTINGS + ["div.item > a", '[data-id="a b"]'])
    def test_idempotent(self, selector):
        once = normalize_selector(selector)
        assert normalize_selector(once) == once

    def test_strips_whitespace(self):
        assert normalize_selector("  #main  ") == "#main"

    def test_multiple_attributes(self):
        assert normalize_selector("a[rel=next][data-x='1']") == 'a[rel="next"][data-x="1"]'

    def test_mismatched_quotes_left_alone(self):
        assert normalize_selector("[type='search\"]") == "[type='search\"]"

    def test_non_string_passes_through(self):
        payload = {"selector": "#a"}
        assert normalize_selector(payload) is payload
        assert normalize_selector(None) is None

    def test_plain_selector_unchanged(self):
        assert normalize_selector("ul > li:nth-child(2)") == "ul > li:nth-child(2)"


class TestIsValidSelector:
    @pytest.mark.parametrize(
        "selector",
        [
            "div.item",
            'a[href="/x"]',
            'a[title="it\'s"]',
            '[data-x="[a]"]',
            'a[title="say \\"hi\\""]',
            "ul > li:nth-child(2)",
        ],
    )
    def test_balanced_is_valid(self, selector):
        assert is_valid_selector(selector) is True

    @pytest.mark.parametrize("selector", ["div'", 'a[title="x]', "'a' 'b", '"'])
    def test_odd_quote_parity_is_invalid(self, selector):
        assert is_valid_selector(selector) is False

    @pytest.mark.parametrize("selector", ["div[", "div]", "a[b]]", "[[x]"])
    def test_unbalanced_brackets(self, selector):
        assert is_valid_selector(selector) is False

    @pytest.mark.parametrize("selector", ["", "   ", None, 42])
    def test_empty_or_non_string(self, selector):
        assert is_valid_selector(selector) is False

    def test_control_characters_rejected(self):
        assert is_valid_selector("div\n.item") is False
        assert is_valid_selector("div\x7f") is False


class TestFormatting:
    def test_short_selector_unchanged(self):
        assert format_selector_for_error("#a") == "#a"

    def test_long_selector_truncated(self):
        out = format_selector_for_error("x" * 150)
        assert len(out) == 100
        assert out.endswith("...")

    def test_non_string_rendered_as_json(self):
        assert format_selector_for_error({"a": 1}) == '{"a": 1}'


class TestSelectorErrorHeuristic:
    @pytest.mark.parametrize(
        "message",
        [
            "Timeout 3000ms exceeded",
            "Element is not visible",
            "strict mode violation: locator('.btn') resolved to 3 elements",
            "No element matches selector: #x",
        ],
    )
    def test_selector_flavoured(self, message):
        assert looks_like_selector_error(message) is True

    def test_navigation_error_is_not_selector_related(self):
        assert looks_like_selector_error("net::ERR_NAME_NOT_RESOLVED at https://x") is False


class TestSuggestSelectorFix:
    def test_clean_selector_has_no_suggestions(self):
        assert suggest_selector_fix("#ok") == []

    def test_mixed_quotes(self):
        assert any("consistent quote" in s for s in suggest_selector_fix("[a='x\"]"))

    def test_unquoted_attribute_value(self):
        suggestions = suggest_selector_fix("input[type=search]")
        assert any('[type="search"]' in s for s in suggestions)

    def test_quoted_attribute_value_is_fine(self):
        assert suggest_selector_fix('input[type="search"]') == []

    def test_contains_pseudo(self):
        assert any(":has-text" in s for s in suggest_selector_fix("button:contains('Go')"))

    def test_jquery_visibility_pseudo(self):
        assert any("jQuery" in s for s in suggest_selector_fix("div:visible"))

    def test_xpath(self):
        assert any("XPath" in s for s in suggest_selector_fix("//div[@id='x']"))

    def test_multiple_match_error(self):
        suggestions = suggest_selector_fix(".btn", "strict mode violation: resolved to 3 elements")
        assert any("multiple elements" in s for s in suggestions)

    def test_timeout_error(self):
        suggestions = suggest_selector_fix("#missing", "Timeout 3000ms exceeded")
        assert any("did not match any elements" in s for s in suggestions)

    def test_does_not_mutate(self):
        selector = "input[type=search]"
        suggest_selector_fix(selector, "Timeout")
        assert selector == "input[type=search]"
