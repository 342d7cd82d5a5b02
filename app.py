"""
Reference Decoder — Product model code breakdown.

Run with:  streamlit run app.py
"""

import pandas as pd
import streamlit as st

from refdecoder.batch import decode_dataframe, read_uploaded_references
from refdecoder.decoder import decode_reference
from refdecoder.loader import CategoryLoad, load_all, load_settings
from refdecoder.suggest import suggest_categories


# ── Config ─────────────────────────────────────────────────

@st.cache_data
def cached_load_settings() -> dict:
    return load_settings()


@st.cache_resource
def cached_load_categories(_settings: dict) -> CategoryLoad:
    return load_all(_settings)


# ── Rendering helpers ──────────────────────────────────────

def _render_result(reference: str, data: CategoryLoad, settings: dict):
    result = decode_reference(reference, data.store)

    if not result.ok:
        st.error(f"{result.error}: `{reference}`")
        sugg_cfg = settings.get("suggestions", {})
        suggestions = suggest_categories(
            reference, data.store,
            limit=int(sugg_cfg.get("limit", 3)),
            min_score=float(sugg_cfg.get("min_score", 60)),
        )
        if suggestions:
            st.markdown("**Closest categories:**")
            for s in suggestions:
                st.caption(f"{s['category']}: prefix `{s['prefix']}` (score {s['score']:g})")
        return

    col1, col2 = st.columns([2, 1])
    with col1:
        st.markdown(f"**Reference:** `{reference.strip()}`")
        st.markdown(f"**Decoded:** {result.summary()}")
    with col2:
        st.metric(label="Category", value=result.category_id.rsplit(".", 1)[0])
        st.caption(f"Prefix: {result.prefix}")
        if result.had_leading_marker:
            st.caption("Leading 'I' marker stripped")
        if result.parsed.truncated:
            st.warning("Reference is shorter than the category structure")

    st.markdown("**Segments:**")
    st.dataframe([s.to_dict() for s in result.segments], use_container_width=True, hide_index=True)

    if result.options:
        st.markdown("**Options:**")
        st.dataframe([o.to_dict() for o in result.options], use_container_width=True, hide_index=True)

    with st.expander("Raw result"):
        st.json(result.to_dict())


# ── Page setup ─────────────────────────────────────────────

st.set_page_config(page_title="Reference Decoder", page_icon="R", layout="wide")

settings = cached_load_settings()
category_data = cached_load_categories(settings)

with st.sidebar:
    st.header("Category files")
    for f in category_data.loaded_files:
        st.caption(f"Loaded: {f}")
    for w in category_data.warnings:
        st.warning(w)
    if category_data.skipped_files:
        with st.expander("Skipped files"):
            st.dataframe(category_data.skipped_files, use_container_width=True, hide_index=True)
    if st.button("Reload categories"):
        cached_load_categories.clear()
        st.rerun()

st.title("Reference Decoder")

tab_single, tab_batch = st.tabs(["Decode", "Batch"])

with tab_single:
    reference = st.text_input("Reference", placeholder="e.g. DS-2CD2043G2-IU")
    if reference.strip():
        _render_result(reference, category_data, settings)

with tab_batch:
    uploaded = st.file_uploader("Reference list (.xlsx, .csv, .tsv)", type=["xlsx", "csv", "tsv"])
    if uploaded is not None:
        df = read_uploaded_references(uploaded)
        if df is None or df.empty:
            st.error(f"Could not read {uploaded.name}")
        else:
            candidates = settings.get("batch", {}).get("reference_columns")
            try:
                out = decode_dataframe(df, category_data.store, candidates=candidates)
            except KeyError as e:
                st.error(str(e))
                out = pd.DataFrame()
            if not out.empty:
                unmatched = int((out["decode_error"] != "").sum())
                st.caption(f"{len(out)} references, {unmatched} without a matching category")
                st.dataframe(out, use_container_width=True, hide_index=True)
                st.download_button(
                    "Download CSV",
                    out.to_csv(index=False),
                    file_name=f"decoded_{uploaded.name.rsplit('.', 1)[0]}.csv",
                    mime="text/csv",
                )
