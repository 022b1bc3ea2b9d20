from __future__ import annotations

from typing import List

import pandas as pd

from jsonstat_table.core.layout import TableLayoutEngine
from jsonstat_table.core.sink import GridSink


class FrameSink(GridSink):
    """
    Collects the laid-out table into a pandas DataFrame.

    The frame is the visible grid: header rows first, then one row per body
    row, label columns before value columns. Cells covered by a span hold an
    empty string. The caption is kept on frame.attrs["caption"].
    """

    def result(self) -> pd.DataFrame:
        df = pd.DataFrame(self.rows(), columns=range(self.num_cols), dtype="object")
        df.attrs["caption"] = self.caption
        df.attrs["num_header_rows"] = self.num_header_rows
        df.attrs["num_label_cols"] = self.geometry.num_label_cols
        return df


def _labels(engine: TableLayoutEngine, dim_idx: int) -> List[str]:
    catalog = engine.catalog
    dim_id = catalog.dimension_id(dim_idx)
    return [catalog.category_label(dim_id, cid) for cid in catalog.category_ids(dim_id)]


def to_multiindex(engine: TableLayoutEngine) -> pd.DataFrame:
    """
    Return the raw values as a DataFrame indexed by the row dimensions and
    with the column dimensions as (MultiIndex) columns.

    Uses the same partition as the table layout, but keeps the values
    unformatted for further processing.
    """
    geo = engine.geometry()
    catalog = engine.catalog
    row_idx = range(geo.num_one_dim, geo.num_one_dim + geo.num_row_dim)
    col_idx = range(geo.num_one_dim + geo.num_row_dim, geo.num_one_dim + len(geo.shape))

    def _index(dims) -> pd.Index:
        dims = list(dims)
        if not dims:
            return pd.RangeIndex(1)
        names = [catalog.dimension_label(catalog.dimension_id(d)) for d in dims]
        return pd.MultiIndex.from_product([_labels(engine, d) for d in dims], names=names)

    values = catalog.values
    ncols = geo.num_value_cols
    rows = [values[i:i + ncols] for i in range(0, len(values), ncols)]
    return pd.DataFrame(rows, index=_index(row_idx), columns=_index(col_idx))
