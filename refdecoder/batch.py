"""
batch.py — Decode whole lists of references into a DataFrame.

Reads .xlsx, .csv and .tsv files (local or Streamlit uploads), finds the column
holding the references, and appends one row of decode columns per reference.
"""

from __future__ import annotations

import io
import warnings
from pathlib import Path
from typing import Iterable

import pandas as pd

from refdecoder.categories import CategoryStore
from refdecoder.decoder import decode_reference

DEFAULT_REFERENCE_COLUMNS = [
    "reference", "ref", "model", "model number", "part_number", "part number", "sku",
]

DECODE_COLUMNS = ["reference", "category", "prefix", "decoded", "options", "error"]


# ── File reading ───────────────────────────────────────────

def _read_bytes_or_path(source, ext: str) -> pd.DataFrame | None:
    if ext == ".xlsx":
        return pd.read_excel(source, engine="openpyxl", dtype=str)
    if ext in (".csv", ".tsv"):
        sep = "\t" if ext == ".tsv" else ","
        return pd.read_csv(source, sep=sep, dtype=str)
    return None


def read_reference_file(filepath: str | Path) -> pd.DataFrame | None:
    filepath = Path(filepath)
    try:
        return _read_bytes_or_path(filepath, filepath.suffix.lower())
    except Exception as e:
        warnings.warn(f"Could not read {filepath.name}: {e}")
        return None


def read_uploaded_references(uploaded_file) -> pd.DataFrame | None:
    """Read a Streamlit UploadedFile into a DataFrame."""
    name = uploaded_file.name
    try:
        return _read_bytes_or_path(io.BytesIO(uploaded_file.getvalue()), Path(name).suffix.lower())
    except Exception as e:
        warnings.warn(f"Could not read uploaded file {name}: {e}")
        return None


def find_reference_column(df: pd.DataFrame, candidates: list[str] | None = None) -> str | None:
    """
    Find the reference column with a two-pass strategy:
    1. Exact match (case-insensitive, stripped)
    2. Contains match (case-insensitive substring)
    """
    candidates = candidates or DEFAULT_REFERENCE_COLUMNS
    cols_lower = {str(c).strip().lower(): c for c in df.columns}
    for cand in candidates:
        if cand.lower() in cols_lower:
            return cols_lower[cand.lower()]
    for cand in candidates:
        for col_lower, col_orig in cols_lower.items():
            if cand.lower() in col_lower:
                return col_orig
    return None


# ── Decoding ───────────────────────────────────────────────

def _decode_row(reference: str, store: CategoryStore) -> dict:
    result = decode_reference(reference, store)
    if not result.ok:
        return {"reference": reference, "category": "", "prefix": "",
                "decoded": "", "options": "", "error": result.error}
    return {
        "reference": reference,
        "category": result.category_id,
        "prefix": result.prefix,
        "decoded": result.summary(),
        "options": " ".join(o.code for o in result.options),
        "error": "",
    }


def decode_references(references: Iterable, store: CategoryStore) -> pd.DataFrame:
    rows = []
    for ref in references:
        if ref is None or pd.isna(ref):
            ref = ""
        rows.append(_decode_row(str(ref).strip(), store))
    return pd.DataFrame(rows, columns=DECODE_COLUMNS)


def decode_dataframe(
    df: pd.DataFrame,
    store: CategoryStore,
    column: str | None = None,
    candidates: list[str] | None = None,
) -> pd.DataFrame:
    """Return a copy of df with the decode columns appended."""
    col = column or find_reference_column(df, candidates)
    if col is None or col not in df.columns:
        raise KeyError(f"No reference column found. Columns: {list(df.columns)}")

    decoded = decode_references(df[col].tolist(), store).drop(columns=["reference"])
    decoded.index = df.index
    out = df.copy()
    for c in decoded.columns:
        out[f"decode_{c}"] = decoded[c]
    return out
