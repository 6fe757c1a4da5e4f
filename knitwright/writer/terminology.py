"""
Abbreviation pass: rewrite full craft terms to standard abbreviations.

Terms come from terminology.yaml, keyed by craft and language. Matching is
case-insensitive on whole words, longest term first, in a single pass so a
replacement is never rewritten again. A capitalised term keeps its capital
("Knit to end" -> "K to end").
"""

from __future__ import annotations

import re
from functools import lru_cache
from types import MappingProxyType

from knitwright.schemas.instructions import Craft
from knitwright.tables.registry import TableRegistry, get_registry


@lru_cache(maxsize=None)
def _compile(terms: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(terms, key=lambda t: (-len(t), t))
    return re.compile(r"\b(?:" + "|".join(re.escape(t) for t in ordered) + r")\b", re.IGNORECASE)


def apply_terminology(text: str, terms: MappingProxyType[str, str]) -> str:
    if not terms:
        return text
    pattern = _compile(tuple(terms))

    def replace(match: re.Match[str]) -> str:
        found = match.group(0)
        abbreviation = terms[found.lower()]
        if found[0].isupper():
            return abbreviation[0].upper() + abbreviation[1:]
        return abbreviation

    return pattern.sub(replace, text)


def abbreviate(
    text: str,
    craft: Craft,
    language: str = "en",
    registry: TableRegistry | None = None,
) -> str:
    """Rewrite full terms in ``text`` to abbreviations for (craft, language)."""
    registry = registry or get_registry()
    return apply_terminology(text, registry.get_terminology(craft, language))


def abbreviation_glossary(
    craft: Craft, language: str = "en", registry: TableRegistry | None = None
) -> dict[str, str]:
    """Return abbreviation -> full term for (craft, language), sorted by abbreviation."""
    registry = registry or get_registry()
    terms = registry.get_terminology(craft, language)
    return {abbr: term for term, abbr in sorted(terms.items(), key=lambda item: item[1].lower())}
