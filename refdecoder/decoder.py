"""
decoder.py — Decode a reference against the loaded categories.

    decode_reference("DS-2CD2T-IR", store)
        → DecodeResult(category_id="IPCamera.json", prefix="DS-2CD", ...)
    decode_reference("XYZ", store)
        → DecodeFailure(reference="XYZ")

Pure: no I/O, never raises for a string input. A reference that matches no
category comes back as a DecodeFailure value, not an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from refdecoder.categories import CategoryStore
from refdecoder.matcher import match_category
from refdecoder.tokenizer import UNKNOWN, UNKNOWN_OPTION, TokenizedReference, tokenize

NO_MATCH_ERROR = "No matching category"


@dataclass(frozen=True)
class DecodeFailure:
    reference: str
    error: str = NO_MATCH_ERROR
    ok: ClassVar[bool] = False

    def to_dict(self) -> dict:
        return {"error": self.error, "ref": self.reference}


@dataclass(frozen=True)
class DecodeResult:
    reference: str
    category_id: str
    prefix: str
    had_leading_marker: bool
    parsed: TokenizedReference
    ok: ClassVar[bool] = True

    @property
    def segments(self):
        return self.parsed.segments

    @property
    def options(self):
        return self.parsed.options

    def summary(self) -> str:
        """One-line reading, e.g. "2MP | Turret | Infrared". Unknown codes show as-is."""
        parts = []
        for seg in self.parsed.segments:
            parts.append(f"{seg.name}: {seg.code}" if seg.meaning == UNKNOWN else seg.meaning)
        for opt in self.parsed.options:
            parts.append(f"?{opt.code}" if opt.meaning == UNKNOWN_OPTION else opt.meaning)
        return " | ".join(p for p in parts if p)

    def to_dict(self) -> dict:
        return {
            "categoryFile": self.category_id,
            "prefix": self.prefix,
            "parsed": self.parsed.to_dict(),
        }


def decode_reference(reference: str, store: CategoryStore) -> DecodeResult | DecodeFailure:
    match = match_category(reference, store)
    if match is None:
        return DecodeFailure(reference=reference)

    parsed = tokenize(match.remainder, match.category.structure, match.category.options)
    return DecodeResult(
        reference=reference,
        category_id=match.category.category_id,
        prefix=match.prefix,
        had_leading_marker=match.had_leading_marker,
        parsed=parsed,
    )
