from __future__ import annotations

import io
import json
import time
import traceback
from typing import Any, Dict, List, Optional

import streamlit as st

from jsonstat_table.config import (
    APP_NAME,
    APP_VERSION,
    JSONSTAT_EXCLUDE_ONE_DIM,
    JSONSTAT_SOURCE_URL,
    JSONSTAT_USE_ROW_SPANS,
    SAMPLES_DIR,
)
from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.core.layout import LayoutOptions, TableLayoutEngine
from jsonstat_table.core.loader import LoaderError, timed_load
from jsonstat_table.logging_config import setup_logging
from jsonstat_table.render import build_engine, render_tsv, render_values_frame
from jsonstat_table.render.excel import ExcelSink
from jsonstat_table.render.html import HtmlSink

SOURCE_SAMPLE = "Bundled sample"
SOURCE_URL = "URL"
SOURCE_UPLOAD = "Upload a file"

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Makes the rowdim/first/last classes of HtmlSink visible in the page
TABLE_CSS = """
<style>
table.jst-viz { border-collapse: collapse; font-size: 0.85rem; }
table.jst-viz th, table.jst-viz td { border: 1px solid #ddd; padding: 2px 6px; }
table.jst-viz td { text-align: right; }
table.jst-viz thead th { background: #f3f3f3; }
table.jst-viz tbody th { text-align: left; vertical-align: top; font-weight: normal; }
table.jst-viz tbody th.first { border-top: 2px solid #999; }
</style>
"""


def _sample_files() -> List[str]:
    if not SAMPLES_DIR.exists():
        return []
    return sorted(p.name for p in SAMPLES_DIR.glob("*.json"))


def _pick_source() -> Optional[Any]:
    """
    Returns whatever load_catalog() accepts, or None when nothing is picked yet.
    """
    kind = st.radio("Dataset source", options=[SOURCE_SAMPLE, SOURCE_URL, SOURCE_UPLOAD], horizontal=True)

    if kind == SOURCE_SAMPLE:
        samples = _sample_files()
        if not samples:
            st.warning(f"No sample files found in {SAMPLES_DIR}.")
            return None
        name = st.selectbox("Sample", options=samples, index=0)
        return SAMPLES_DIR / name

    if kind == SOURCE_URL:
        url = st.text_input("JSON-stat URL", value=JSONSTAT_SOURCE_URL)
        return url.strip() or None

    uploaded = st.file_uploader("JSON-stat file", type=["json"])
    if uploaded is None:
        return None
    try:
        return json.loads(uploaded.getvalue().decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LoaderError(f"Uploaded file is not valid JSON: {exc}") from exc


def _layout_options(catalog: DimensionCatalog) -> Dict[str, Any]:
    with st.sidebar:
        st.header("Layout")
        exclude_one_dim = st.checkbox(
            "Exclude leading size-one dimensions",
            value=JSONSTAT_EXCLUDE_ONE_DIM,
        )
        num_dims = len(catalog.dimension_sizes(exclude_one_dim))
        auto = TableLayoutEngine(catalog, LayoutOptions(exclude_one_dim=exclude_one_dim)).auto_num_row_dim()
        num_row_dim = st.number_input(
            "Number of row dimensions",
            min_value=0,
            max_value=num_dims,
            value=auto,
            step=1,
        )
        use_row_spans = st.checkbox("Merge repeated row labels (rowspan)", value=JSONSTAT_USE_ROW_SPANS)
        repeat_labels = st.checkbox("Repeat labels in every row and column", value=False)
        no_label_last_dim = st.checkbox("Hide label row of the last column dimension", value=False)
        no_label_dim = st.checkbox("Hide all dimension label rows", value=False)
        null_label = st.text_input("Text for missing values", value="")

    return {
        "exclude_one_dim": bool(exclude_one_dim),
        "num_row_dim": int(num_row_dim),
        "use_row_spans": bool(use_row_spans),
        "repeat_labels": bool(repeat_labels),
        "no_label_last_dim": bool(no_label_last_dim),
        "no_label_dim": bool(no_label_dim),
        "null_label": null_label,
    }


def _transpose_controls(catalog: DimensionCatalog) -> DimensionCatalog:
    with st.expander("Dimension order", expanded=False):
        order = st.multiselect(
            "Reorder the dimensions (all must be selected)",
            options=catalog.ids,
            default=catalog.ids,
        )
        if order and order != catalog.ids:
            if len(order) != len(catalog.ids):
                st.warning("Select every dimension exactly once to transpose.")
                return catalog
            return catalog.transpose_ids(order)
    return catalog


def _render_metadata(catalog: DimensionCatalog, options: Dict[str, Any]) -> None:
    with st.expander("Dimensions (developer view)", expanded=False):
        st.write(f"Values: {catalog.num_values}  |  Size: {catalog.sizes}")
        for dim_id in catalog.ids:
            st.write(f"**{catalog.dimension_label(dim_id)}** ({dim_id})")
            st.dataframe(catalog.categories_frame(dim_id), use_container_width=True)

        st.write("Values by row and column dimensions:")
        st.dataframe(render_values_frame(catalog, **options), use_container_width=True)


def _render_downloads(catalog: DimensionCatalog, options: Dict[str, Any], stem: str) -> None:
    col1, col2 = st.columns(2)

    with col1:
        tsv_options = dict(options)
        tsv_options.pop("no_label_dim", None)
        tsv_options.pop("repeat_labels", None)
        tsv_options.pop("use_row_spans", None)
        st.download_button(
            "Download TSV",
            data=render_tsv(catalog, **tsv_options),
            file_name=f"{stem}.tsv",
            mime="text/tab-separated-values",
        )

    with col2:
        wb = build_engine(catalog, **options).render(ExcelSink())
        buf = io.BytesIO()
        wb.save(buf)
        st.download_button(
            "Download Excel",
            data=buf.getvalue(),
            file_name=f"{stem}.xlsx",
            mime=XLSX_MIME,
        )


def _render_table_view() -> None:
    try:
        source = _pick_source()
    except LoaderError as lerr:
        st.error(str(lerr))
        return

    if source is None:
        st.info("Pick a dataset to render.")
        return

    try:
        with st.spinner("Loading dataset..."):
            catalog, elapsed = timed_load(source)
        st.caption(f"Loaded in {elapsed:0.2f}s")

        catalog = _transpose_controls(catalog)
        options = _layout_options(catalog)

        t0 = time.perf_counter()
        html = build_engine(catalog, **options).render(HtmlSink())
        st.caption(f"Rendered in {time.perf_counter() - t0:0.2f}s")

        st.markdown(TABLE_CSS + html, unsafe_allow_html=True)

        _render_downloads(catalog, options, stem=_stem(source))
        _render_metadata(catalog, options)

    except LoaderError as lerr:
        st.error(f"Could not load the dataset: {lerr}")
        st.text_area("Traceback", value=traceback.format_exc(), height=220)

    except Exception as e:
        st.error("Unexpected error while rendering the table.")
        st.code(repr(e))
        st.text_area("Traceback", value=traceback.format_exc(), height=280)


def _stem(source: Any) -> str:
    name = getattr(source, "stem", "")
    return name or "table"


def run_app() -> None:
    setup_logging()
    st.set_page_config(page_title=APP_NAME, page_icon="📊", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Version {APP_VERSION}")

    _render_table_view()
