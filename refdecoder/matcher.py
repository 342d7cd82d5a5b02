"""
matcher.py — Pick the category a reference belongs to.

Categories are tried in store order and prefixes in definition order;
the first prefix the reference starts with wins (no longest-prefix rule).
"""

from __future__ import annotations

from dataclasses import dataclass

from refdecoder.categories import CategoryDefinition, CategoryStore

# Leading "I" on some references (e.g. iDS-...) is a line marker, not part of the prefix.
MARKER = "I"


@dataclass(frozen=True)
class CategoryMatch:
    category: CategoryDefinition
    prefix: str
    had_leading_marker: bool
    remainder: str


def normalize_reference(reference: str) -> str:
    return str(reference).strip().upper()


def split_marker(normalized: str) -> tuple[str, bool]:
    """Strip a single leading marker character. Returns (working, had_marker)."""
    if normalized.startswith(MARKER):
        return normalized[len(MARKER):], True
    return normalized, False


def match_category(reference: str, store: CategoryStore) -> CategoryMatch | None:
    working, had_marker = split_marker(normalize_reference(reference))
    for category in store:
        for prefix in category.prefixes:
            if working.startswith(prefix):
                return CategoryMatch(
                    category=category,
                    prefix=prefix,
                    had_leading_marker=had_marker,
                    remainder=working[len(prefix):],
                )
    return None
