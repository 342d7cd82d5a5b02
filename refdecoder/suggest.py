"""
suggest.py — "Did you mean" hints for references that match no category.

Scores every category prefix against the start of the reference with a
fuzzy ratio and keeps the best prefix per category.
"""

from __future__ import annotations

from rapidfuzz import fuzz

from refdecoder.categories import CategoryStore
from refdecoder.matcher import normalize_reference, split_marker


def suggest_categories(
    reference: str,
    store: CategoryStore,
    limit: int = 3,
    min_score: float = 60.0,
) -> list[dict]:
    working, _ = split_marker(normalize_reference(reference))
    if not working:
        return []

    best: dict[str, dict] = {}
    for category in store:
        for prefix in category.prefixes:
            score = fuzz.ratio(working[:len(prefix)], prefix.upper())
            current = best.get(category.category_id)
            if current is None or score > current["score"]:
                best[category.category_id] = {
                    "category": category.category_id,
                    "prefix": prefix,
                    "score": score,
                }

    ranked = sorted(
        (s for s in best.values() if s["score"] >= min_score),
        key=lambda s: s["score"],
        reverse=True,
    )
    return [dict(s, score=round(s["score"], 1)) for s in ranked[:limit]]
