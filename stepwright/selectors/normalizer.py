"""Selector normalization, validation and fix suggestions."""

from __future__ import annotations

import json
import re
from typing import Any

# [attr=\'value\'] as it arrives from over-escaped YAML
_ESCAPED_ATTR_RE = re.compile(r"\[([^=\]]+)=\\(['\"])([^'\"]+)\\(['\"])\]")
# [attr=value], [attr='value'], [attr="value"]
_ATTR_RE = re.compile(r"\[([^=\]]+)=(['\"]?)([^'\"\]]+)(['\"]?)\]")
_UNQUOTED_ATTR_RE = re.compile(r"\[([^=\]]+)=([^\[\]]+)\]")
_QUOTED_VALUE_RE = re.compile(r"^([\"']).*\1$")

_MAX_ERROR_SELECTOR_LENGTH = 100

_SELECTOR_ERROR_MARKERS = (
    "timeout",
    "waiting for",
    "not visible",
    "not found",
    "no element",
    "multiple elements",
    "strict mode violation",
    "resolved to",
    "selector",
)


def _canonical_attr(match: re.Match[str]) -> str:
    attr, q1, value, q2 = match.groups()
    # Mismatched quotes are left for the validator to reject.
    if q1 != q2:
        return match.group(0)
    return f'[{attr}="{value}"]'


def normalize_selector(selector: Any) -> Any:
    """
    Rewrite attribute-value quoting into one canonical double-quoted form.

    ``input[type=search]``, ``input[type='search']`` and
    ``input[type=\\'search\\']`` all become ``input[type="search"]``.
    Non-string input (e.g. a structured step payload) is returned unchanged.
    """
    if not isinstance(selector, str):
        return selector

    selector = selector.strip()
    selector = _ESCAPED_ATTR_RE.sub(lambda m: f'[{m.group(1)}="{m.group(3)}"]', selector)
    selector = _ATTR_RE.sub(_canonical_attr, selector)
    return selector


def is_valid_selector(selector: Any) -> bool:
    """
    Structural check: non-empty, no control characters, balanced brackets
    and quotes.

    A single left-to-right scan tracks bracket depth and the parity of each
    quote type; brackets inside quotes and escaped characters are ignored.
    """
    if not isinstance(selector, str) or not selector.strip():
        return False
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in selector):
        return False

    depth = 0
    single = 0
    double = 0
    escaped = False

    for ch in selector:
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
            continue

        in_quotes = single % 2 == 1 or double % 2 == 1
        if ch == "[" and not in_quotes:
            depth += 1
        elif ch == "]" and not in_quotes:
            depth -= 1
            if depth < 0:
                return False
        elif ch == "'" and double % 2 == 0:
            single += 1
        elif ch == '"' and single % 2 == 0:
            double += 1

    return depth == 0 and single % 2 == 0 and double % 2 == 0


def format_selector_for_error(selector: Any) -> str:
    """Render a selector for an error message, truncating long ones."""
    if not isinstance(selector, str):
        return json.dumps(selector, default=str)
    if len(selector) > _MAX_ERROR_SELECTOR_LENGTH:
        return selector[: _MAX_ERROR_SELECTOR_LENGTH - 3] + "..."
    return selector


def looks_like_selector_error(message: str) -> bool:
    """Heuristic: does this failure text point at a bad or ambiguous selector?"""
    text = message.lower()
    return any(marker in text for marker in _SELECTOR_ERROR_MARKERS)


def suggest_selector_fix(selector: str, error: str | None = None) -> list[str]:
    """
    Advisory suggestions for a selector that failed or looks suspicious.

    Pure function: the selector itself is never rewritten.
    """
    suggestions: list[str] = []
    if not isinstance(selector, str):
        return suggestions

    if "'" in selector and '"' in selector:
        suggestions.append("Try using consistent quote types in your selector")

    attr_match = _UNQUOTED_ATTR_RE.search(selector)
    if attr_match and not _QUOTED_VALUE_RE.match(attr_match.group(2)):
        attr, value = attr_match.groups()
        suggestions.append(f'Try wrapping the attribute value in quotes: [{attr}="{value}"]')

    if ":contains(" in selector:
        suggestions.append(
            ':contains() is not standard CSS. Use :has-text("...") or text="..." instead'
        )

    if ":visible" in selector or ":hidden" in selector:
        suggestions.append(
            "jQuery pseudo-selectors are not supported. Use a wait step with state: visible/hidden instead"
        )

    if selector.startswith("//") or "xpath=" in selector:
        suggestions.append(
            "Consider using CSS selectors instead of XPath for better performance and readability"
        )

    if error:
        lowered = error.lower()
        if "multiple elements" in lowered or "strict mode violation" in lowered:
            suggestions.append(
                "The selector matches multiple elements. Make it more specific or use :first-child, :nth-child(), etc."
            )
        elif "not visible" in lowered:
            suggestions.append(
                "The element exists but is hidden. Wait for it to become visible or reveal it with another action first"
            )
        elif "timeout" in lowered:
            suggestions.append(
                "The selector did not match any elements. Verify the selector is correct and the page has loaded"
            )

    return suggestions
