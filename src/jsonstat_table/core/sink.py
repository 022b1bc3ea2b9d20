"""
Cell sink contract between the table layout engine and the output backends.

There are four kinds of cells:

  |-----------------------------------------------------------|
  | header label cell | header value cell | header value cell |
  |===================|===================|===================|
  |     label cell    |    value cell     |     value cell    |
  |-------------------|-------------------|-------------------|

e.g.:

  |-----------------------------------------------------------|
  |    OECD country   |     year 2003     |     year 2004     |
  |===================|===================|===================|
  |       Sweden      |    6.56574156     |    7.373480411    |
  |-------------------|-------------------|-------------------|
  |     Switzerland   |    4.033356027    |     4.31699694    |
  |-------------------|-------------------|-------------------|

The engine passes explicit coordinates with every call: ``row_idx`` counts
header rows and body rows separately (both start at zero) and ``col_idx`` is
the absolute column, label columns first.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from html import unescape as html_unescape
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from jsonstat_table.core.layout import TableGeometry

BOUNDARY_FIRST = "first"
BOUNDARY_LAST = "last"

_TAG = re.compile(r"<[^>]*>")


def strip_markup(text: str) -> str:
    """Plain text of a trusted caption, for backends that cannot show markup."""
    return html_unescape(_TAG.sub("", text))


class CellSink(ABC):
    """Consumes the cells of one render pass. Create a fresh sink per render."""

    def start(self, geometry: "TableGeometry") -> None:
        """Called once before any other cell call."""
        self.geometry = geometry

    @abstractmethod
    def set_caption(self, text: str, trusted: bool) -> None:
        """Untrusted captions come from the dataset and must never be interpreted as markup."""

    @abstractmethod
    def begin_header_row(self, row_idx: int) -> None:
        ...

    @abstractmethod
    def emit_label_header_cell(self, row_idx: int, col_idx: int, text: str, is_last_header_row: bool) -> None:
        ...

    @abstractmethod
    def emit_value_header_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        colspan: Optional[int],
        is_dimension_row: bool,
    ) -> None:
        ...

    @abstractmethod
    def begin_body_row(self, row_idx: int) -> None:
        ...

    @abstractmethod
    def emit_label_body_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        rowspan: Optional[int],
        boundary: Optional[str],
        group_start: bool,
    ) -> None:
        ...

    @abstractmethod
    def emit_value_body_cell(self, row_idx: int, col_idx: int, text: str, offset: int) -> None:
        ...

    @abstractmethod
    def result(self) -> Any:
        ...


class GridSink(CellSink):
    """
    Base for backends that need a rectangular grid (TSV, DataFrame, worksheet).

    Cells are stored sparsely by (row, col), header rows first, body rows
    after them. Positions covered by a span are left out and filled with the
    empty string by rows(). Spans are recorded separately for backends that
    can merge cells.
    """

    def __init__(self) -> None:
        self.caption: Optional[str] = None
        self.cells: Dict[Tuple[int, int], str] = {}
        self.spans: List[Tuple[int, int, int, int]] = []   # (row, col, rowspan, colspan)

    def start(self, geometry: "TableGeometry") -> None:
        super().start(geometry)
        self.cells = {}
        self.spans = []
        self.caption = None

    @property
    def num_header_rows(self) -> int:
        return len(self.geometry.header_rows)

    @property
    def num_cols(self) -> int:
        return self.geometry.num_label_cols + self.geometry.num_value_cols

    @property
    def num_rows(self) -> int:
        return self.num_header_rows + self.geometry.num_body_rows

    def _put(self, row: int, col: int, text: str, rowspan: Optional[int] = None, colspan: Optional[int] = None) -> None:
        self.cells[(row, col)] = text
        if (rowspan or 1) > 1 or (colspan or 1) > 1:
            self.spans.append((row, col, rowspan or 1, colspan or 1))

    def set_caption(self, text: str, trusted: bool) -> None:
        self.caption = strip_markup(text) if trusted else text

    def begin_header_row(self, row_idx: int) -> None:
        pass

    def begin_body_row(self, row_idx: int) -> None:
        pass

    def emit_label_header_cell(self, row_idx: int, col_idx: int, text: str, is_last_header_row: bool) -> None:
        self._put(row_idx, col_idx, text)

    def emit_value_header_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        colspan: Optional[int],
        is_dimension_row: bool,
    ) -> None:
        self._put(row_idx, col_idx, text, colspan=colspan)

    def emit_label_body_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        rowspan: Optional[int],
        boundary: Optional[str],
        group_start: bool,
    ) -> None:
        self._put(self.num_header_rows + row_idx, col_idx, text, rowspan=rowspan)

    def emit_value_body_cell(self, row_idx: int, col_idx: int, text: str, offset: int) -> None:
        self._put(self.num_header_rows + row_idx, col_idx, text)

    def rows(self) -> List[List[str]]:
        return [[self.cells.get((r, c), "") for c in range(self.num_cols)] for r in range(self.num_rows)]
