from __future__ import annotations

from refdecoder.categories import CategoryStore
from refdecoder.decoder import NO_MATCH_ERROR, DecodeFailure, decode_reference


def test_end_to_end_example(store) -> None:
    result = decode_reference("DS-2CD2T-IR", store)
    assert result.ok
    assert result.to_dict() == {
        "categoryFile": "IPCamera.json",
        "prefix": "DS-2CD",
        "parsed": {
            "segments": [
                {"name": "Series", "code": "2", "meaning": "2MP"},
                {"name": "Type", "code": "T", "meaning": "Turret"},
            ],
            "options": [{"code": "IR", "meaning": "Infrared"}],
            "leftover": "",
        },
    }


def test_no_matching_category(store) -> None:
    result = decode_reference("XYZ-1", store)
    assert isinstance(result, DecodeFailure)
    assert not result.ok
    assert result.to_dict() == {"error": NO_MATCH_ERROR, "ref": "XYZ-1"}


def test_empty_store_never_matches() -> None:
    assert decode_reference("DS-2CD2T", CategoryStore()).to_dict() == {
        "error": "No matching category",
        "ref": "DS-2CD2T",
    }


def test_marker_is_not_decoded_as_a_segment(store) -> None:
    result = decode_reference("iDS-2CD2042", store)
    assert result.had_leading_marker is True
    assert result.prefix == "DS-2CD"
    assert [s.code for s in result.segments] == ["2", "042"]
    assert result.options == ()


def test_lowercase_and_whitespace_reference(store) -> None:
    result = decode_reference("  ds-7608ni-k2/8p ", store)
    assert result.category_id == "NVR.json"
    assert [s.to_dict() for s in result.segments] == [
        {"name": "Channels", "code": "08", "meaning": "(value)"},
        {"name": "Type", "code": "NI", "meaning": "Network"},
    ]
    assert [o.code for o in result.options] == ["K2", "8P"]
    assert result.reference == "  ds-7608ni-k2/8p "


def test_meanings_keep_their_case(store) -> None:
    result = decode_reference("ds-2cd2t", store)
    assert [s.meaning for s in result.segments] == ["2MP", "Turret"]


def test_decode_is_deterministic(store) -> None:
    assert decode_reference("DS-2CD2T-IR", store) == decode_reference("DS-2CD2T-IR", store)


def test_summary_line(store) -> None:
    assert decode_reference("DS-2CD2T-IR", store).summary() == "2MP | Turret | Infrared"
    assert decode_reference("DS-2CD9Q-Z", store).summary() == "Series: 9 | Type: Q | ?Z"
