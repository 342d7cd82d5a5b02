from __future__ import annotations

from refdecoder.suggest import suggest_categories


def test_close_prefix_is_suggested(store) -> None:
    out = suggest_categories("DS-2CE2T", store)
    assert out[0]["category"] == "IPCamera.json"
    assert out[0]["prefix"] == "DS-2CD"
    assert 60 <= out[0]["score"] < 100


def test_best_prefix_per_category(store) -> None:
    out = suggest_categories("DS-77X", store, min_score=0)
    nvr = [s for s in out if s["category"] == "NVR.json"]
    assert len(nvr) == 1
    assert nvr[0]["prefix"] == "DS-77"
    assert [s["score"] for s in out] == sorted((s["score"] for s in out), reverse=True)


def test_limit_and_threshold(store) -> None:
    assert len(suggest_categories("DS-2CE2T", store, limit=1, min_score=0)) == 1
    assert suggest_categories("QQQQQQ", store) == []
    assert suggest_categories("   ", store) == []
