"""Confidence ranking for candidate selectors against a live target."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from stepwright.core.config import RankingWeights
from stepwright.core.exceptions import StepwrightError
from stepwright.selectors.normalizer import is_valid_selector, normalize_selector
from stepwright.target.base import BaseTarget

logger = logging.getLogger(__name__)

_MAX_SAMPLE_LENGTH = 100

_CLASS_TOKEN_RE = re.compile(r"\.[a-zA-Z0-9_-]+")
_ID_TOKEN_RE = re.compile(r"#[a-zA-Z0-9_-]+")
_ATTR_TOKEN_RE = re.compile(r"\[[^\]]+\]")
_TAG_TOKEN_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)")

# Collects class names on the page that contain any of the given prefixes.
_JS_SIMILAR_CLASSES = """
(args) => {
    const { prefixes, limit } = args;
    const found = [];
    const seen = new Set();
    for (const prefix of prefixes) {
        let nodes;
        try {
            nodes = document.querySelectorAll('[class*="' + prefix.replace(/"/g, '\\\\"') + '"]');
        } catch (e) {
            continue;
        }
        for (const el of nodes) {
            for (const cls of Array.from(el.classList)) {
                if (cls.includes(prefix) && !seen.has(cls)) {
                    seen.add(cls);
                    found.push(cls);
                    if (found.length >= limit) return found;
                }
            }
        }
    }
    return found;
}
"""


@dataclass
class RankedSelector:
    selector: str
    count: int
    samples: list[str] = field(default_factory=list)
    confidence: float = 0.0


@dataclass
class SelectorProbe:
    """Outcome of probing a single selector."""

    valid: bool
    count: int
    sample: str | None = None
    error: str | None = None


def extract_selector_tokens(selector: str) -> list[str]:
    """Split a selector into its class, id, attribute and leading tag tokens."""
    tokens: list[str] = []
    tokens.extend(_CLASS_TOKEN_RE.findall(selector))
    tokens.extend(_ID_TOKEN_RE.findall(selector))
    tokens.extend(_ATTR_TOKEN_RE.findall(selector))
    tag = _TAG_TOKEN_RE.match(selector.strip())
    if tag:
        tokens.append(tag.group(1))
    return tokens


class SelectorRanker:
    """Scores candidate selectors by how plausible a repeated-data match they are."""

    def __init__(self, target: BaseTarget, weights: RankingWeights | None = None) -> None:
        self._target = target
        self._weights = weights or RankingWeights()

    async def rank(self, candidates: list[str], sample_size: int = 2) -> list[RankedSelector]:
        """
        Probe every candidate and return the matching ones, best first.

        Candidates are probed one at a time: the target is a single session.
        Selectors matching nothing (or failing to query at all) are dropped.
        """
        ranked: list[RankedSelector] = []
        for candidate in candidates:
            result = await self._probe(candidate, sample_size)
            if result.count > 0:
                ranked.append(result)

        ranked.sort(key=lambda r: (-round(r.confidence, 6), -r.count))
        return ranked

    async def _probe(self, candidate: str, sample_size: int) -> RankedSelector:
        selector = normalize_selector(candidate)
        if not is_valid_selector(selector):
            logger.debug(f"Skipping invalid candidate selector {candidate!r}")
            return RankedSelector(selector=selector, count=0)
        try:
            count = await self._target.query_count(selector)
            if count == 0:
                return RankedSelector(selector=selector, count=0)
            texts = await self._target.query_texts(selector, sample_size)
        except StepwrightError as exc:
            logger.debug(f"Probe failed for {selector!r}: {exc}")
            return RankedSelector(selector=selector, count=0)

        samples = [t.strip()[:_MAX_SAMPLE_LENGTH] for t in texts if t and t.strip()]
        confidence = self.score(selector, count, samples)
        return RankedSelector(selector=selector, count=count, samples=samples, confidence=confidence)

    def score(self, selector: str, count: int, samples: list[str]) -> float:
        """Heuristic confidence in [0, 1]; see ``RankingWeights`` for the knobs."""
        w = self._weights
        confidence = w.base

        if count >= w.many_matches:
            confidence += w.many_matches_bonus
        elif count >= w.some_matches:
            confidence += w.some_matches_bonus

        if len(samples) >= 2:
            lengths = [len(s) for s in samples]
            mean = sum(lengths) / len(lengths)
            variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
            if variance < mean * w.uniform_variance_ratio:
                confidence += w.uniform_text_bonus

        if "." in selector or "[" in selector:
            confidence += w.qualified_bonus

        if selector.strip().lower() in w.generic_tags:
            confidence -= w.generic_tag_penalty

        if any(keyword in selector for keyword in w.container_keywords):
            confidence += w.container_bonus

        return max(0.0, min(1.0, confidence))

    async def test_selector(self, selector: str) -> SelectorProbe:
        """Probe one selector and report whether it matches anything."""
        selector = normalize_selector(selector)
        if not is_valid_selector(selector):
            return SelectorProbe(valid=False, count=0, error="Invalid selector syntax")
        try:
            count = await self._target.query_count(selector)
            if count == 0:
                return SelectorProbe(valid=False, count=0, error="No elements found")
            texts = await self._target.query_texts(selector, 1)
        except StepwrightError as exc:
            return SelectorProbe(valid=False, count=0, error=str(exc))
        sample = texts[0].strip()[:_MAX_SAMPLE_LENGTH] if texts else ""
        return SelectorProbe(valid=True, count=count, sample=sample)

    async def find_alternatives(self, failed_selector: str, limit: int = 5) -> list[str]:
        """
        Suggest working selectors near a failed one.

        Each class/id/attribute/tag token of the failed selector is re-probed
        on its own; then classes sharing a three-character prefix with any
        class token are looked up, a cheap proxy for renamed or hashed class
        names. Results are deduplicated but not ranked.
        """
        alternatives: list[str] = []

        def add(candidate: str) -> None:
            if candidate not in alternatives and candidate != failed_selector:
                alternatives.append(candidate)

        for token in extract_selector_tokens(failed_selector):
            if len(alternatives) >= limit:
                break
            try:
                if await self._target.query_count(token) > 0:
                    add(token)
            except StepwrightError:
                continue

        prefixes: list[str] = []
        for cls in _CLASS_TOKEN_RE.findall(failed_selector):
            prefix = cls[1:4]
            if len(prefix) == 3 and prefix not in prefixes:
                prefixes.append(prefix)

        if prefixes and len(alternatives) < limit:
            try:
                similar = await self._target.evaluate(
                    _JS_SIMILAR_CLASSES, {"prefixes": prefixes, "limit": limit * 4}
                )
            except StepwrightError as exc:
                logger.debug(f"Similar-class lookup failed: {exc}")
                similar = []
            for cls in similar or []:
                add(f".{cls}")

        return alternatives[:limit]
