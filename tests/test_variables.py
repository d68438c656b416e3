"""Unit tests for ${name} substitution."""

from __future__ import annotations

import pytest

from stepwright.core.exceptions import UnresolvedVariableError
from stepwright.workflow.variables import parse_assignments, substitute


class TestSubstitute:
    def test_replaced_everywhere(self):
        payload = {
            "url": "${BASE}/search?q=${QUERY}",
            "form": {"q": "${QUERY}", "tags": ["${QUERY}", "static"]},
            "pair": ("${BASE}", 3),
        }
        out = substitute(payload, {"BASE": "https://x", "QUERY": "cats"})
        assert out == {
            "url": "https://x/search?q=cats",
            "form": {"q": "cats", "tags": ["cats", "static"]},
            "pair": ("https://x", 3),
        }

    def test_unbound_becomes_empty(self):
        assert substitute("a${Y}b", {}) == "ab"

    def test_strict_raises_on_unbound(self):
        with pytest.raises(UnresolvedVariableError) as exc_info:
            substitute({"x": "${MISSING}"}, {}, strict=True)
        assert exc_info.value.name == "MISSING"
        assert "${MISSING}" in str(exc_info.value)

    def test_non_string_leaves_untouched(self):
        assert substitute({"n": 5, "b": True, "none": None}, {"n": "x"}) == {"n": 5, "b": True, "none": None}

    def test_input_not_mutated(self):
        payload = {"text": "${A}"}
        substitute(payload, {"A": "1"})
        assert payload == {"text": "${A}"}

    def test_values_are_stringified(self):
        assert substitute("${N}", {"N": 7}) == "7"

    def test_only_braced_form(self):
        assert substitute("$A and ${A}", {"A": "x"}) == "$A and x"


class TestParseAssignments:
    def test_pairs(self):
        assert parse_assignments(["A=1", "URL=https://x/?a=b"]) == {"A": "1", "URL": "https://x/?a=b"}

    def test_malformed_ignored(self):
        assert parse_assignments(["novalue", "=x", "EMPTY="]) == {"EMPTY": ""}

    def test_none(self):
        assert parse_assignments(None) == {}
