"""
Output backends for the table layout.

This package contains:
- html:  HtmlSink, an HTML <table>
- tsv:   TsvSink, separated text
- frame: FrameSink, a pandas DataFrame of the visible grid
- excel: ExcelSink, an openpyxl workbook

The render_* functions below are the usual entry points: they take a catalog,
a parsed dataset or anything load_catalog() accepts, plus LayoutOptions
keywords.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
from openpyxl import Workbook

from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.core.layout import LayoutOptions, TableLayoutEngine
from jsonstat_table.core.loader import Source, load_catalog
from jsonstat_table.render.excel import ExcelSink, save_workbook
from jsonstat_table.render.frame import FrameSink, to_multiindex
from jsonstat_table.render.html import HtmlSink
from jsonstat_table.render.tsv import TsvSink

CatalogLike = Union[DimensionCatalog, Source]


def as_catalog(source: CatalogLike) -> DimensionCatalog:
    if isinstance(source, DimensionCatalog):
        return source
    return load_catalog(source)


def build_engine(source: CatalogLike, **options: Any) -> TableLayoutEngine:
    return TableLayoutEngine(as_catalog(source), LayoutOptions.from_config(**options))


def render_html(source: CatalogLike, css_class: str = "jst-viz", **options: Any) -> str:
    return build_engine(source, **options).render(HtmlSink(css_class=css_class))


def render_tsv(
    source: CatalogLike,
    separator_col: str = "\t",
    separator_row: str = "\n",
    **options: Any,
) -> str:
    """
    Render as separated text.

    Flat text has no spans, so unless told otherwise the dimension-label
    header rows are left out and row labels are repeated on every line.
    """
    options.setdefault("no_label_dim", True)
    options.setdefault("repeat_labels", True)
    options.setdefault("use_row_spans", False)
    sink = TsvSink(separator_col=separator_col, separator_row=separator_row)
    return build_engine(source, **options).render(sink)


def render_frame(source: CatalogLike, **options: Any) -> pd.DataFrame:
    return build_engine(source, **options).render(FrameSink())


def render_values_frame(source: CatalogLike, **options: Any) -> pd.DataFrame:
    return to_multiindex(build_engine(source, **options))


def render_workbook(
    source: CatalogLike,
    path: Optional[Union[str, Path]] = None,
    sheet_title: str = "table",
    **options: Any,
) -> Workbook:
    """Render into a new workbook, saved to ``path`` when one is given."""
    wb = build_engine(source, **options).render(ExcelSink(sheet_title=sheet_title))
    if path is not None:
        save_workbook(wb, path)
    return wb


__all__ = [
    "ExcelSink",
    "FrameSink",
    "HtmlSink",
    "TsvSink",
    "as_catalog",
    "build_engine",
    "render_frame",
    "render_html",
    "render_tsv",
    "render_values_frame",
    "render_workbook",
]
