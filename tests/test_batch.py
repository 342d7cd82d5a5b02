from __future__ import annotations

import io

import pandas as pd
import pytest

from refdecoder.batch import (
    DECODE_COLUMNS,
    decode_dataframe,
    decode_references,
    find_reference_column,
    read_reference_file,
    read_uploaded_references,
)


class _Upload:
    """Minimal stand-in for a Streamlit UploadedFile."""

    def __init__(self, name: str, payload: bytes):
        self.name = name
        self._payload = payload

    def getvalue(self) -> bytes:
        return self._payload


def test_decode_references_rows(store) -> None:
    out = decode_references(["DS-2CD2T-IR", "nope", None], store)
    assert list(out.columns) == DECODE_COLUMNS
    first, second, third = out.to_dict("records")
    assert first["category"] == "IPCamera.json"
    assert first["decoded"] == "2MP | Turret | Infrared"
    assert first["options"] == "IR"
    assert first["error"] == ""
    assert second["error"] == "No matching category"
    assert second["category"] == ""
    assert third["reference"] == ""
    assert third["error"] == "No matching category"


@pytest.mark.parametrize(
    ("columns", "expected"),
    [
        (["Qty", "Reference"], "Reference"),
        (["MODEL", "Qty"], "MODEL"),
        (["Customer", "Model No."], "Model No."),
        (["Qty", "Price"], None),
    ],
)
def test_find_reference_column(columns: list[str], expected: str | None) -> None:
    assert find_reference_column(pd.DataFrame(columns=columns)) == expected


def test_decode_dataframe_appends_columns(store) -> None:
    df = pd.DataFrame({"Model": ["DS-7608NI-K2/8P", "XYZ"], "Qty": [2, 1]}, index=[10, 11])
    out = decode_dataframe(df, store)
    assert list(out.index) == [10, 11]
    assert list(out["Qty"]) == [2, 1]
    assert list(out["decode_category"]) == ["NVR.json", ""]
    assert list(out["decode_error"]) == ["", "No matching category"]
    assert "decode_reference" not in out.columns
    assert "decode_category" not in df.columns


def test_decode_dataframe_without_reference_column(store) -> None:
    with pytest.raises(KeyError):
        decode_dataframe(pd.DataFrame({"Qty": [1]}), store)


def test_read_reference_csv_file(tmp_path) -> None:
    path = tmp_path / "refs.csv"
    path.write_text("reference,qty\nDS-2CD2T-IR,1\n0012,3\n")
    df = read_reference_file(path)
    assert list(df["reference"]) == ["DS-2CD2T-IR", "0012"]


def test_read_reference_xlsx_upload() -> None:
    buf = io.BytesIO()
    pd.DataFrame({"SKU": ["DS-7608NI-K2/8P"]}).to_excel(buf, index=False, engine="openpyxl")
    df = read_uploaded_references(_Upload("refs.xlsx", buf.getvalue()))
    assert list(df["SKU"]) == ["DS-7608NI-K2/8P"]


def test_unsupported_or_unreadable_files(tmp_path) -> None:
    assert read_reference_file(tmp_path / "refs.pdf") is None
    with pytest.warns(UserWarning):
        assert read_reference_file(tmp_path / "missing.csv") is None
    with pytest.warns(UserWarning):
        assert read_uploaded_references(_Upload("bad.xlsx", b"not a workbook")) is None
