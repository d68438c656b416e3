"""Selector resolution: normalize, rank, disambiguate, digest."""

from stepwright.selectors.digest import DOMDigest, DOMDigestCollector, PatternCount, digest_size, format_digest
from stepwright.selectors.disambiguator import (
    Disambiguation,
    ElementMatch,
    SelectorDisambiguator,
    choose,
    format_matches,
)
from stepwright.selectors.normalizer import (
    format_selector_for_error,
    is_valid_selector,
    looks_like_selector_error,
    normalize_selector,
    suggest_selector_fix,
)
from stepwright.selectors.ranker import RankedSelector, SelectorProbe, SelectorRanker

__all__ = [
    "DOMDigest",
    "DOMDigestCollector",
    "Disambiguation",
    "ElementMatch",
    "PatternCount",
    "RankedSelector",
    "SelectorDisambiguator",
    "SelectorProbe",
    "SelectorRanker",
    "choose",
    "digest_size",
    "format_digest",
    "format_matches",
    "format_selector_for_error",
    "is_valid_selector",
    "looks_like_selector_error",
    "normalize_selector",
    "suggest_selector_fix",
]
