"""DOM digest: a bounded structural summary of the current page."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field

from stepwright.target.base import BaseTarget

logger = logging.getLogger(__name__)

MIN_PATTERN_COUNT = 3
MAX_PATTERNS = 30
MAX_TEXTS = 30
MAX_ATTRS = 30
MIN_TEXT_LENGTH = 10  # exclusive
MAX_TEXT_LENGTH = 100  # exclusive

MEANINGFUL_TAGS = ("article", "section", "nav", "header", "footer", "main", "aside")
_REJECTED_TAGS = ("SCRIPT", "STYLE", "META", "NOSCRIPT", "SVG", "IMG", "HEAD", "LINK", "TITLE")

# Single pass over the document. Raw tallies only; bounds are applied in Python.
_JS_COLLECT_DIGEST = """
(args) => {
    const { rejected, meaningfulTags, minText, maxText, maxRawTexts } = args;
    const rejectedSet = new Set(rejected);
    const meaningful = new Set(meaningfulTags);
    const counts = {};
    const attrs = [];
    const attrSeen = new Set();

    function bump(key) {
        counts[key] = (counts[key] || 0) + 1;
    }

    for (const el of document.querySelectorAll('*')) {
        if (rejectedSet.has(el.tagName.toUpperCase())) continue;

        if (typeof el.className === 'string') {
            for (const cls of el.className.split(/\\s+/)) {
                if (cls) bump('.' + cls);
            }
        }

        const role = el.getAttribute('role');
        if (role) bump('[role="' + role + '"]');

        const tag = el.tagName.toLowerCase();
        if (meaningful.has(tag)) bump(tag);

        for (const attr of Array.from(el.attributes)) {
            const name = attr.name;
            if ((name.startsWith('data-') || name.startsWith('aria-')) && !attrSeen.has(name)) {
                attrSeen.add(name);
                attrs.push(name);
            }
        }
    }

    const texts = [];
    if (document.body) {
        const walker = document.createTreeWalker(document.body, NodeFilter.SHOW_TEXT, {
            acceptNode: (node) => {
                const parent = node.parentElement;
                if (!parent || rejectedSet.has(parent.tagName.toUpperCase())) {
                    return NodeFilter.FILTER_REJECT;
                }
                if (parent.getClientRects().length === 0) {
                    return NodeFilter.FILTER_REJECT;
                }
                const text = (node.textContent || '').trim();
                if (text.length > minText && text.length < maxText) {
                    return NodeFilter.FILTER_ACCEPT;
                }
                return NodeFilter.FILTER_REJECT;
            },
        });
        let node;
        while ((node = walker.nextNode()) && texts.length < maxRawTexts) {
            texts.push((node.textContent || '').trim());
        }
    }

    return {
        url: window.location.href,
        title: document.title,
        counts: counts,
        texts: texts,
        attrs: attrs,
    };
}
"""


@dataclass
class PatternCount:
    selector: str
    count: int


@dataclass
class DOMDigest:
    url: str
    title: str
    patterns: list[PatternCount] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    attrs: list[str] = field(default_factory=list)
    timestamp: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "DOMDigest":
        return cls(
            url=d.get("url", ""),
            title=d.get("title", ""),
            patterns=[PatternCount(selector=p["selector"], count=p["count"]) for p in d.get("patterns", [])],
            texts=list(d.get("texts", [])),
            attrs=list(d.get("attrs", [])),
            timestamp=d.get("timestamp", 0.0),
        )


def build_digest(raw: dict, timestamp: float | None = None) -> DOMDigest:
    """Apply the digest bounds to raw page tallies."""
    counts: dict[str, int] = raw.get("counts") or {}
    patterns = [
        PatternCount(selector=sel, count=int(n))
        for sel, n in counts.items()
        if int(n) >= MIN_PATTERN_COUNT
    ]
    # sorted() is stable, so equal counts keep document order
    patterns = sorted(patterns, key=lambda p: -p.count)[:MAX_PATTERNS]

    texts: list[str] = []
    for text in raw.get("texts") or []:
        text = text.strip()
        if MIN_TEXT_LENGTH < len(text) < MAX_TEXT_LENGTH and text not in texts:
            texts.append(text)
        if len(texts) >= MAX_TEXTS:
            break

    attrs: list[str] = []
    for name in raw.get("attrs") or []:
        if (name.startswith("data-") or name.startswith("aria-")) and name not in attrs:
            attrs.append(name)
        if len(attrs) >= MAX_ATTRS:
            break

    return DOMDigest(
        url=raw.get("url", ""),
        title=raw.get("title", ""),
        patterns=patterns,
        texts=texts,
        attrs=attrs,
        timestamp=time.time() if timestamp is None else timestamp,
    )


class DOMDigestCollector:
    """
    Collects one digest per URL.

    The last digest is kept alongside the URL it was taken from; it is
    reused only while the target is still on that URL.
    """

    def __init__(self, target: BaseTarget) -> None:
        self._target = target
        self._cached: tuple[str, DOMDigest] | None = None

    async def collect(self) -> DOMDigest:
        url = await self._target.current_url()
        if self._cached is not None and self._cached[0] == url:
            logger.debug(f"Digest cache hit for {url}")
            return self._cached[1]

        raw = await self._target.evaluate(
            _JS_COLLECT_DIGEST,
            {
                "rejected": list(_REJECTED_TAGS),
                "meaningfulTags": list(MEANINGFUL_TAGS),
                "minText": MIN_TEXT_LENGTH,
                "maxText": MAX_TEXT_LENGTH,
                "maxRawTexts": MAX_TEXTS * 4,
            },
        )
        digest = build_digest(raw or {})
        # Key by the URL we checked against, so the guard compares like with like.
        self._cached = (url, digest)
        logger.debug(f"Collected digest for {url}: {len(digest.patterns)} patterns, {len(digest.texts)} texts")
        return digest

    def invalidate(self) -> None:
        self._cached = None

    @property
    def cached_url(self) -> str | None:
        return self._cached[0] if self._cached else None


def format_digest(digest: DOMDigest) -> str:
    """Render a digest for an operator or a prompt."""
    lines = [
        f"URL: {digest.url}",
        f"Title: {digest.title}",
        "",
        "Top Patterns:",
        *(f"  {p.selector} ({p.count} elements)" for p in digest.patterns[:10]),
        "",
        "Sample Text Content:",
        *(f'  "{t}"' for t in digest.texts[:10]),
        "",
        "Available Attributes:",
        f"  {', '.join(digest.attrs[:20])}",
    ]
    return "\n".join(lines)


def digest_size(digest: DOMDigest) -> int:
    """Serialized size of the digest in characters."""
    return len(json.dumps(digest.to_dict()))
