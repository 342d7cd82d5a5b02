"""
tokenizer.py — Split a reference remainder into segments and options.

Two phases over one left-to-right cursor:
1. Structure: one segment per structure block. Fixed-width blocks take exactly
   n characters; variable-width blocks take the longest matching map key, else
   1-3 digits, else a single character. A "-" ends this phase early.
2. Options: longest matching option code, else a single character.
   "-" and "/" between options are skipped.

Every branch moves the cursor forward, so the leftover is always empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from refdecoder.categories import FixedWidthBlock, StructureBlock, VariableBlock, keys_longest_first

UNKNOWN = "Unknown"
FREE_VALUE = "(value)"
NUMERIC_VALUE = "(numeric value)"
KNOWN_KEY_NO_TEXT = "Known key (no mapping text)"
UNKNOWN_OPTION = "Unknown option"

STRUCTURE_BREAK = "-"
OPTION_SEPARATORS = ("-", "/")

_DIGITS = re.compile(r"[0-9]{1,3}")


@dataclass(frozen=True)
class Segment:
    name: str
    code: str
    meaning: str
    truncated: bool = False     # input ended before the block was filled

    def to_dict(self) -> dict:
        return {"name": self.name, "code": self.code, "meaning": self.meaning}


@dataclass(frozen=True)
class DecodedOption:
    code: str
    meaning: str

    def to_dict(self) -> dict:
        return {"code": self.code, "meaning": self.meaning}


@dataclass(frozen=True)
class TokenizedReference:
    segments: tuple[Segment, ...] = ()
    options: tuple[DecodedOption, ...] = ()
    leftover: str = ""

    @property
    def truncated(self) -> bool:
        return any(s.truncated for s in self.segments)

    def to_dict(self) -> dict:
        return {
            "segments": [s.to_dict() for s in self.segments],
            "options": [o.to_dict() for o in self.options],
            "leftover": self.leftover,
        }


def _starts_with_ci(text: str, pos: int, key: str) -> bool:
    return text[pos:pos + len(key)].upper() == key.upper()


def _fixed_segment(text: str, pos: int, block: FixedWidthBlock) -> tuple[Segment, int]:
    piece = text[pos:pos + block.width].upper()
    # A code mapped to empty text reads as unknown.
    meaning = block.code_map.get(piece) or (UNKNOWN if block.code_map else FREE_VALUE)
    seg = Segment(block.name, piece, meaning, truncated=len(piece) < block.width)
    return seg, min(pos + block.width, len(text))


def _variable_segment(text: str, pos: int, block: VariableBlock) -> tuple[Segment, int]:
    for key in block.keys:
        if _starts_with_ci(text, pos, key):
            meaning = block.code_map.get(key) or KNOWN_KEY_NO_TEXT
            return Segment(block.name, key.upper(), meaning), pos + len(key)

    m = _DIGITS.match(text, pos)
    if m:
        return Segment(block.name, m.group(0), NUMERIC_VALUE), m.end()

    char = text[pos:pos + 1]
    return Segment(block.name, char, UNKNOWN, truncated=not char), min(pos + 1, len(text))


def tokenize(
    remainder: str,
    structure: Sequence[StructureBlock],
    options: Mapping[str, str],
) -> TokenizedReference:
    text = remainder
    pos = 0
    segments: list[Segment] = []

    # ── Structure phase ──
    for block in structure:
        if text.startswith(STRUCTURE_BREAK, pos):
            pos += len(STRUCTURE_BREAK)
            break
        if isinstance(block, FixedWidthBlock):
            seg, pos = _fixed_segment(text, pos, block)
        else:
            seg, pos = _variable_segment(text, pos, block)
        segments.append(seg)

    # ── Options phase ──
    option_keys = keys_longest_first(options)
    decoded: list[DecodedOption] = []
    while pos < len(text):
        if text[pos] in OPTION_SEPARATORS:
            pos += 1
            continue
        for key in option_keys:
            if _starts_with_ci(text, pos, key):
                decoded.append(DecodedOption(key, options[key]))
                pos += len(key)
                break
        else:
            decoded.append(DecodedOption(text[pos], UNKNOWN_OPTION))
            pos += 1

    return TokenizedReference(
        segments=tuple(segments),
        options=tuple(decoded),
        leftover=text[pos:],
    )
