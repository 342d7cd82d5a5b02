"""
categories.py — Category definitions and the in-memory category store.

A category definition describes one product family: the prefixes that identify it,
the ordered structure blocks that split the rest of a reference into segments,
and the option codes that may trail the structure.

Raw definitions (dicts read from JSON/YAML) are decoded once here into frozen
values, so the decoder never has to inspect raw data while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

VARIABLE_WIDTH = "variable"


class CategoryFormatError(ValueError):
    """A raw definition could not be decoded into a CategoryDefinition."""


# ── Structure blocks ───────────────────────────────────────

@dataclass(frozen=True)
class FixedWidthBlock:
    name: str
    width: int
    code_map: Mapping[str, str]


@dataclass(frozen=True)
class VariableBlock:
    name: str
    code_map: Mapping[str, str]
    keys: tuple[str, ...]       # longest first


StructureBlock = FixedWidthBlock | VariableBlock


def keys_longest_first(code_map: Mapping[str, str]) -> tuple[str, ...]:
    """Non-empty keys ordered by decreasing length; ties keep definition order."""
    # An empty key would match without consuming anything.
    return tuple(sorted((k for k in code_map if k), key=len, reverse=True))


def _freeze_map(raw, where: str) -> Mapping[str, str]:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise CategoryFormatError(f"{where}: expected a mapping, got {type(raw).__name__}")
    return MappingProxyType({str(k): "" if v is None else str(v) for k, v in raw.items()})


def _parse_width(raw_length, where: str) -> int | None:
    """Return the fixed width, or None for a variable-width block."""
    if isinstance(raw_length, str):
        if raw_length.strip().lower() == VARIABLE_WIDTH:
            return None
        if raw_length.strip().isdigit():
            raw_length = int(raw_length.strip())
    if isinstance(raw_length, bool) or not isinstance(raw_length, int) or raw_length <= 0:
        raise CategoryFormatError(
            f"{where}: length must be a positive integer or '{VARIABLE_WIDTH}', got {raw_length!r}"
        )
    return raw_length


def parse_block(raw: dict, index: int) -> StructureBlock:
    where = f"structure[{index}]"
    if not isinstance(raw, dict):
        raise CategoryFormatError(f"{where}: expected a mapping")
    name = str(raw.get("name") or f"Block {index + 1}")
    code_map = _freeze_map(raw.get("map"), f"{where}.map")
    width = _parse_width(raw.get("length"), where)
    if width is None:
        return VariableBlock(name=name, code_map=code_map, keys=keys_longest_first(code_map))
    return FixedWidthBlock(name=name, width=width, code_map=code_map)


# ── Category definition ────────────────────────────────────

@dataclass(frozen=True)
class CategoryDefinition:
    category_id: str
    prefixes: tuple[str, ...]
    structure: tuple[StructureBlock, ...]
    options: Mapping[str, str]


def parse_category(category_id: str, raw: dict) -> CategoryDefinition:
    """
    Decode one raw category resource:
        {prefixes: [str], structure: [{name, length, map?}], options?: {code: meaning}}
    """
    if not isinstance(raw, dict):
        raise CategoryFormatError(f"{category_id}: expected a mapping at top level")

    prefixes = raw.get("prefixes")
    if not isinstance(prefixes, list) or not prefixes:
        raise CategoryFormatError(f"{category_id}: 'prefixes' must be a non-empty list")

    structure = raw.get("structure") or []
    if not isinstance(structure, list):
        raise CategoryFormatError(f"{category_id}: 'structure' must be a list")

    try:
        blocks = tuple(parse_block(b, i) for i, b in enumerate(structure))
    except CategoryFormatError as e:
        raise CategoryFormatError(f"{category_id}: {e}") from e

    return CategoryDefinition(
        category_id=category_id,
        prefixes=tuple(str(p) for p in prefixes),
        structure=blocks,
        options=_freeze_map(raw.get("options"), f"{category_id}: options"),
    )


# ── Store ──────────────────────────────────────────────────

class CategoryStore:
    """Loaded category definitions keyed by resource id, in load order."""

    def __init__(self, categories: Iterable[CategoryDefinition] = ()):
        self._by_id: dict[str, CategoryDefinition] = {}
        for cat in categories:
            self._by_id[cat.category_id] = cat

    @classmethod
    def from_mapping(cls, raw: Mapping[str, dict]) -> CategoryStore:
        """Build a store from {resource_id: raw_definition}, keeping mapping order."""
        return cls(parse_category(cid, definition) for cid, definition in raw.items())

    @property
    def ids(self) -> list[str]:
        return list(self._by_id)

    def get(self, category_id: str) -> CategoryDefinition | None:
        return self._by_id.get(category_id)

    def __iter__(self) -> Iterator[CategoryDefinition]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id
