"""``${name}`` substitution through step arguments."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from stepwright.core.exceptions import UnresolvedVariableError

logger = logging.getLogger(__name__)

VARIABLE_RE = re.compile(r"\$\{(\w+)\}")


def substitute(value: Any, variables: Mapping[str, str], strict: bool = False) -> Any:
    """
    Replace ``${name}`` in every string inside ``value``.

    Walks dicts, lists and tuples recursively and returns new containers;
    non-string leaves are returned as-is. Unbound names become ``""``
    unless ``strict`` is set, in which case ``UnresolvedVariableError`` is
    raised.
    """
    if isinstance(value, str):
        return _substitute_str(value, variables, strict)
    if isinstance(value, Mapping):
        return {k: substitute(v, variables, strict) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute(v, variables, strict) for v in value]
    if isinstance(value, tuple):
        return tuple(substitute(v, variables, strict) for v in value)
    return value


def _substitute_str(text: str, variables: Mapping[str, str], strict: bool) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        if strict:
            raise UnresolvedVariableError(name)
        logger.debug(f"Unbound variable ${{{name}}} substituted with empty string")
        return ""

    return VARIABLE_RE.sub(replace, text)


def parse_assignments(pairs: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings; the value may itself contain ``=``."""
    variables: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if key and sep:
            variables[key] = value
    return variables
