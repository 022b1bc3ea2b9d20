"""
Table layout of a JSON-stat dataset.

A table consists of a number of dimensions that define the rows of the
two-dimensional table (row dimensions) and a number of dimensions that define
its columns (column dimensions). Each row dimension gets its own label column
holding category labels; the column dimensions hold the values.

Per column dimension two header rows are laid out: one with the dimension
label and one with the category labels. Labels span as many columns (or, for
row dimensions, rows) as the dimensions nested inside them multiply to.

In the context of JSON-stat we speak of values; in a table of data cells and
header cells. Value cells and label cells are used here.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import logging
import math

from jsonstat_table.config import JSONSTAT_EXCLUDE_ONE_DIM, JSONSTAT_USE_ROW_SPANS
from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.core.formatting import ValueFormatter
from jsonstat_table.core.partition import auto_row_dim_count, partition
from jsonstat_table.core.shape import strides
from jsonstat_table.core.sink import BOUNDARY_FIRST, BOUNDARY_LAST, CellSink

logger = logging.getLogger(__name__)


@dataclass
class LayoutOptions:
    """
    Options of a layout pass.

      - num_row_dim:       number of row dimensions, auto-derived when None
      - exclude_one_dim:   drop the leading run of size-one dimensions
      - no_label_last_dim: skip the header row labelling the innermost column dimension
      - no_label_dim:      skip every dimension-label header row (flat text output)
      - use_row_spans:     coalesce repeated row labels into one spanning cell
      - repeat_labels:     write labels in every row and column instead of only
                           at group boundaries
      - caption:           caption set by the caller, treated as trusted markup
      - null_label:        text for null values and labels
    """
    num_row_dim: Optional[int] = None
    exclude_one_dim: bool = False
    no_label_last_dim: bool = False
    no_label_dim: bool = False
    use_row_spans: bool = True
    repeat_labels: bool = False
    caption: Optional[str] = None
    null_label: Optional[str] = None

    @classmethod
    def from_config(cls, **overrides) -> "LayoutOptions":
        base = cls(exclude_one_dim=JSONSTAT_EXCLUDE_ONE_DIM, use_row_spans=JSONSTAT_USE_ROW_SPANS)
        return replace(base, **overrides)


@dataclass(frozen=True)
class TableGeometry:
    """Numbers derived from the shape and the options, recomputed for every render."""
    shape: List[int]
    strides: List[int]
    row_dims: List[int]
    col_dims: List[int]
    row_strides: List[int]
    num_one_dim: int
    num_header_rows: int
    num_label_cols: int
    num_value_cols: int
    num_body_rows: int
    header_rows: Tuple[int, ...]    # logical header rows that are rendered, in order

    @property
    def num_row_dim(self) -> int:
        return len(self.row_dims)

    def is_last_header_row(self, header_row: int) -> bool:
        return header_row == self.num_header_rows - 1

    def is_dimension_row(self, header_row: int) -> bool:
        """Even logical header rows label a column dimension, odd ones its categories."""
        return bool(self.col_dims) and header_row % 2 == 0

    def col_dim_at(self, header_row: int) -> int:
        """Renderable index of the column dimension a logical header row belongs to."""
        return self.num_row_dim + header_row // 2


class TableLayoutEngine:
    """
    Lays out a dataset as a table and emits the cells to a CellSink.

    The engine keeps no state between or during renders: every render() call
    computes its own geometry and counters, so one engine may serve
    concurrent renders as long as each uses its own sink.
    """

    def __init__(self, catalog: DimensionCatalog, options: Optional[LayoutOptions] = None) -> None:
        self.catalog = catalog
        self.options = options or LayoutOptions()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def geometry(self) -> TableGeometry:
        opts = self.options
        shape = self.catalog.dimension_sizes(opts.exclude_one_dim)
        part = partition(shape, opts.num_row_dim, total_dims=len(self.catalog.sizes))

        num_value_cols = math.prod(part.col_dims) if part.col_dims else 1
        # one row for the dimension label and one for its category labels per column dimension
        num_header_rows = len(part.col_dims) * 2 if part.col_dims else 1

        header_rows = list(range(num_header_rows))
        if part.col_dims:
            if opts.no_label_dim:
                header_rows = [r for r in header_rows if r % 2 == 1]
            elif opts.no_label_last_dim:
                header_rows.remove(num_header_rows - 2)

        geo = TableGeometry(
            shape=shape,
            strides=strides(shape),
            row_dims=part.row_dims,
            col_dims=part.col_dims,
            row_strides=strides(part.row_dims),
            num_one_dim=part.num_one_dim,
            num_header_rows=num_header_rows,
            num_label_cols=len(part.row_dims),
            num_value_cols=num_value_cols,
            num_body_rows=self.catalog.num_values // num_value_cols,
            header_rows=tuple(header_rows),
        )
        logger.debug(
            "Table geometry: shape=%s rows=%s cols=%s header_rows=%s value_cols=%d",
            geo.shape,
            geo.row_dims,
            geo.col_dims,
            geo.header_rows,
            geo.num_value_cols,
        )
        return geo

    def auto_num_row_dim(self) -> int:
        """Number of row dimensions used when num_row_dim is not set."""
        sizes = self.catalog.dimension_sizes(self.options.exclude_one_dim)
        return min(auto_row_dim_count(sizes), len(sizes))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, sink: CellSink):
        """Lay out the whole table into ``sink`` and return sink.result()."""
        geo = self.geometry()
        formatter = ValueFormatter(self.catalog, self.options.null_label)

        sink.start(geo)
        self._add_caption(sink)
        self._add_headers(sink, geo, formatter)
        self._add_rows(sink, geo, formatter)

        logger.info(
            "Rendered %d values as %d header rows x %d body rows, %d label + %d value columns",
            self.catalog.num_values,
            len(geo.header_rows),
            geo.num_body_rows,
            geo.num_label_cols,
            geo.num_value_cols,
        )
        return sink.result()

    def _add_caption(self, sink: CellSink) -> None:
        # an explicit caption may contain markup, one read from the dataset never does
        if self.options.caption is not None:
            sink.set_caption(self.options.caption, trusted=True)
        elif self.catalog.label:
            sink.set_caption(self.catalog.label, trusted=False)

    def _dim_id(self, geo: TableGeometry, renderable_idx: int) -> str:
        return self.catalog.dimension_id(geo.num_one_dim + renderable_idx)

    def _add_headers(self, sink: CellSink, geo: TableGeometry, formatter: ValueFormatter) -> None:
        repeat = self.options.repeat_labels

        for row_idx, header_row in enumerate(geo.header_rows):
            sink.begin_header_row(row_idx)
            is_last = geo.is_last_header_row(header_row)

            for dim_idx in range(geo.num_label_cols):
                label = None
                if is_last or repeat:
                    label = self.catalog.dimension_label(self._dim_id(geo, dim_idx))
                sink.emit_label_header_cell(row_idx, dim_idx, formatter.format_header_cell(label), is_last)

            if not geo.col_dims:
                sink.emit_value_header_cell(row_idx, geo.num_label_cols, formatter.format_header_cell(None), None, False)
                continue

            self._add_value_header_cells(sink, geo, formatter, row_idx, header_row)

    def _add_value_header_cells(
        self,
        sink: CellSink,
        geo: TableGeometry,
        formatter: ValueFormatter,
        row_idx: int,
        header_row: int,
    ) -> None:
        col_dim = geo.col_dim_at(header_row)
        dim_id = self._dim_id(geo, col_dim)
        stride = geo.strides[col_dim]
        group = geo.shape[col_dim] * stride
        is_dim_row = geo.is_dimension_row(header_row)
        # a dimension label spans its whole group, a category label the nested dimensions
        span = 1 if self.options.repeat_labels else (group if is_dim_row else stride)

        for col in range(0, geo.num_value_cols, span):
            if is_dim_row:
                label = self.catalog.dimension_label(dim_id)
            else:
                category_id = self.catalog.category_id(dim_id, (col % group) // stride)
                label = self.catalog.category_label(dim_id, category_id)
            sink.emit_value_header_cell(
                row_idx,
                geo.num_label_cols + col,
                formatter.format_header_cell(label),
                span if span > 1 else None,
                is_dim_row,
            )

    def _add_rows(self, sink: CellSink, geo: TableGeometry, formatter: ValueFormatter) -> None:
        row_idx = -1
        for offset, value in enumerate(self.catalog.values):
            col = offset % geo.num_value_cols
            if col == 0:
                row_idx += 1
                sink.begin_body_row(row_idx)
                for dim_idx in range(geo.num_label_cols):
                    self._add_label_cell_body(sink, geo, formatter, row_idx, dim_idx)
            sink.emit_value_body_cell(
                row_idx,
                geo.num_label_cols + col,
                formatter.format_value_cell(value, offset),
                offset,
            )

    def _add_label_cell_body(
        self,
        sink: CellSink,
        geo: TableGeometry,
        formatter: ValueFormatter,
        row_idx: int,
        dim_idx: int,
    ) -> None:
        opts = self.options
        stride = geo.row_strides[dim_idx]
        group = geo.row_dims[dim_idx] * stride
        group_start = row_idx % stride == 0
        if opts.use_row_spans and not group_start:
            return  # covered by the rowspan of the cell above

        label = None
        if group_start or opts.repeat_labels:
            dim_id = self._dim_id(geo, dim_idx)
            category_id = self.catalog.category_id(dim_id, (row_idx % group) // stride)
            label = self.catalog.category_label(dim_id, category_id)

        modulo = row_idx % group
        boundary = None
        if modulo == 0:
            boundary = BOUNDARY_FIRST
        elif modulo == group - stride:
            boundary = BOUNDARY_LAST

        sink.emit_label_body_cell(
            row_idx,
            dim_idx,
            formatter.format_header_cell(label),
            stride if opts.use_row_spans and stride > 1 else None,
            boundary,
            group_start,
        )
