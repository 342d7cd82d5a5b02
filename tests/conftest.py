from __future__ import annotations

import pytest

from refdecoder.categories import CategoryStore


CAMERA = {
    "prefixes": ["DS-2CD"],
    "structure": [
        {"name": "Series", "length": 1, "map": {"2": "2MP"}},
        {"name": "Type", "length": "variable", "map": {"T": "Turret"}},
    ],
    "options": {"IR": "Infrared"},
}

RECORDER = {
    "prefixes": ["DS-76", "DS-77"],
    "structure": [
        {"name": "Channels", "length": 2},
        {"name": "Type", "length": "variable", "map": {"NI": "Network", "N": "Basic network"}},
    ],
    "options": {"K2": "2 SATA", "8P": "8 PoE"},
}


@pytest.fixture
def raw_categories() -> dict[str, dict]:
    return {"IPCamera.json": CAMERA, "NVR.json": RECORDER}


@pytest.fixture
def store(raw_categories) -> CategoryStore:
    return CategoryStore.from_mapping(raw_categories)
