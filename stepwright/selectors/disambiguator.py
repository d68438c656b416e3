"""Disambiguation of selectors that match more than one element."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from stepwright.target.base import BaseTarget

logger = logging.getLogger(__name__)

MAX_MATCHES = 10
_MAX_TEXT_LENGTH = 50

_JS_DESCRIBE_MATCHES = """
(args) => {
    const { selector, limit, maxText } = args;
    const matches = Array.from(document.querySelectorAll(selector)).slice(0, limit);

    function isUnique(sel) {
        try {
            return document.querySelectorAll(sel).length === 1;
        } catch (e) {
            return false;
        }
    }

    function uniqueSelector(el, index) {
        const tag = el.tagName.toLowerCase();

        // 1. id
        if (el.id) {
            return '#' + CSS.escape(el.id);
        }

        // 2. smallest unique prefix of the class list (1..3 classes)
        const classes = Array.from(el.classList)
            .filter(c => /^[a-zA-Z_-][a-zA-Z0-9_-]*$/.test(c));
        for (let n = 1; n <= Math.min(classes.length, 3); n++) {
            const sel = '.' + classes.slice(0, n).join('.');
            if (isUnique(sel)) return sel;
        }

        // 3. position among the parent's element children
        const parent = el.parentElement;
        if (parent) {
            const k = Array.from(parent.children).indexOf(el) + 1;
            return tag + ':nth-child(' + k + ')';
        }

        // 4. last resort
        return tag + ':nth-of-type(' + (index + 1) + ')';
    }

    return matches.map((el, index) => {
        const rect = el.getBoundingClientRect();
        return {
            index: index,
            selector: uniqueSelector(el, index),
            tag_name: el.tagName.toLowerCase(),
            text: (el.textContent || '').trim().substring(0, maxText),
            visible: rect.width > 0 && rect.height > 0,
            id: el.id || null,
            classes: Array.from(el.classList),
            position: {
                top: Math.round(rect.top),
                left: Math.round(rect.left),
                width: Math.round(rect.width),
                height: Math.round(rect.height),
            },
        };
    });
}
"""


@dataclass
class ElementPosition:
    top: int = 0
    left: int = 0
    width: int = 0
    height: int = 0


@dataclass
class ElementMatch:
    """One element matched by an ambiguous selector."""

    index: int
    selector: str  # unique selector for this element
    tag_name: str
    text: str = ""
    visible: bool = False
    id: str | None = None
    classes: list[str] = field(default_factory=list)
    position: ElementPosition = field(default_factory=ElementPosition)

    @classmethod
    def from_dict(cls, raw: dict) -> "ElementMatch":
        pos = raw.get("position") or {}
        return cls(
            index=int(raw.get("index", 0)),
            selector=raw.get("selector", ""),
            tag_name=raw.get("tag_name", ""),
            text=(raw.get("text") or "")[:_MAX_TEXT_LENGTH],
            visible=bool(raw.get("visible", False)),
            id=raw.get("id") or None,
            classes=list(raw.get("classes") or []),
            position=ElementPosition(
                top=int(pos.get("top", 0)),
                left=int(pos.get("left", 0)),
                width=int(pos.get("width", 0)),
                height=int(pos.get("height", 0)),
            ),
        )


@dataclass
class Disambiguation:
    count: int
    elements: list[ElementMatch] | None = None  # None when count <= 1

    @property
    def is_ambiguous(self) -> bool:
        return self.count > 1


class SelectorDisambiguator:
    """Derives a unique selector for each element an ambiguous selector matches.

    Read-only: the target is only queried.
    """

    def __init__(self, target: BaseTarget) -> None:
        self._target = target

    async def resolve(self, selector: str, limit: int = MAX_MATCHES) -> Disambiguation:
        count = await self._target.query_count(selector)
        if count <= 1:
            return Disambiguation(count=count)

        raw = await self._target.evaluate(
            _JS_DESCRIBE_MATCHES,
            {"selector": selector, "limit": min(count, limit, MAX_MATCHES), "maxText": _MAX_TEXT_LENGTH},
        )
        elements = [ElementMatch.from_dict(item) for item in raw or []]
        logger.debug(f"{selector!r} matched {count} elements; described {len(elements)}")
        return Disambiguation(count=count, elements=elements)


def format_matches(elements: list[ElementMatch]) -> str:
    """Operator-facing listing of ambiguous matches."""
    lines = [f"Found {len(elements)} elements. Please use a more specific selector:", "---"]
    for el in elements:
        visibility = "visible" if el.visible else "hidden"
        lines.append(f"[{el.index}] <{el.tag_name}> {visibility}")
        lines.append(f"  Suggested selector: {el.selector}")
        if el.id:
            lines.append(f"  ID: {el.id}")
        if el.classes:
            lines.append(f"  Classes: {', '.join(el.classes)}")
        if el.text:
            lines.append(f'  Text: "{el.text}"')
        lines.append(f"  Position: {el.position.left}x{el.position.top}")
        lines.append("")
    return "\n".join(lines)


def choose(
    elements: list[ElementMatch],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> str | None:
    """
    Ask the operator to pick one of the matches.

    Returns the chosen element's unique selector, or None when the answer is
    empty or not a listed index.
    """
    if not elements:
        return None
    for el in elements:
        text = f' - "{el.text}"' if el.text else ""
        mark = "visible" if el.visible else "hidden"
        output_fn(f"[{el.index}] <{el.tag_name}> {mark} {el.selector}{text}")
    answer = input_fn("Multiple elements found. Select one: ").strip()
    if not answer.isdigit():
        return None
    by_index = {el.index: el for el in elements}
    picked = by_index.get(int(answer))
    return picked.selector if picked else None
