from __future__ import annotations

from html import escape as html_escape
from typing import Dict, List, Optional

from jsonstat_table.core.layout import TableGeometry
from jsonstat_table.core.sink import CellSink


def _attrs(attrs: Dict[str, Optional[object]]) -> str:
    parts = [f' {name}="{html_escape(str(val))}"' for name, val in attrs.items() if val is not None]
    return "".join(parts)


def _cell(tag: str, text: str, attrs: Dict[str, Optional[object]]) -> str:
    # always write a closing tag, <td/> is invalid on a non-void element
    return f"<{tag}{_attrs(attrs)}>{html_escape(text)}</{tag}>"


class HtmlSink(CellSink):
    """
    Renders the cells as an HTML table.

    Header and label cells become <th> with a scope attribute, value cells
    <td>. Label cells of the body carry the classes rowdim1, rowdim2, ... and
    'first' / 'last' at the group boundaries for styling. All text is escaped
    except a caption that was explicitly marked as trusted.
    """

    def __init__(self, css_class: str = "jst-viz") -> None:
        self.css_class = css_class
        self._caption: Optional[str] = None
        self._head: List[List[str]] = []
        self._body: List[List[str]] = []

    def start(self, geometry: TableGeometry) -> None:
        super().start(geometry)
        self._caption = None
        self._head = []
        self._body = []

    def set_caption(self, text: str, trusted: bool) -> None:
        self._caption = text if trusted else html_escape(text)

    def begin_header_row(self, row_idx: int) -> None:
        while len(self._head) <= row_idx:
            self._head.append([])

    def begin_body_row(self, row_idx: int) -> None:
        while len(self._body) <= row_idx:
            self._body.append([])

    def emit_label_header_cell(self, row_idx: int, col_idx: int, text: str, is_last_header_row: bool) -> None:
        scope = "col" if is_last_header_row else None
        self._head[row_idx].append(_cell("th", text, {"scope": scope}))

    def emit_value_header_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        colspan: Optional[int],
        is_dimension_row: bool,
    ) -> None:
        if not self.geometry.col_dims:
            self._head[row_idx].append(_cell("th", text, {}))
            return
        scope = "colgroup" if colspan else "col"
        self._head[row_idx].append(_cell("th", text, {"scope": scope, "colspan": colspan}))

    def emit_label_body_cell(
        self,
        row_idx: int,
        col_idx: int,
        text: str,
        rowspan: Optional[int],
        boundary: Optional[str],
        group_start: bool,
    ) -> None:
        classes: List[str] = []
        if group_start:
            classes.append(f"rowdim{col_idx + 1}")
        if boundary:
            classes.append(boundary)
        attrs = {
            "scope": "rowgroup" if self.geometry.row_strides[col_idx] > 1 else "row",
            "rowspan": rowspan,
            "class": " ".join(classes) or None,
        }
        self._body[row_idx].append(_cell("th", text, attrs))

    def emit_value_body_cell(self, row_idx: int, col_idx: int, text: str, offset: int) -> None:
        self._body[row_idx].append(_cell("td", text, {}))

    def result(self) -> str:
        geo = self.geometry
        last_dim_size = geo.shape[-1] if geo.shape else 1
        table_attrs = {
            "class": f"{self.css_class} numRowDims{geo.num_row_dim} lastDimSize{last_dim_size}",
            "data-shape": ",".join(str(s) for s in geo.shape),
            "data-num-row-dim": geo.num_row_dim,
        }

        parts: List[str] = [f"<table{_attrs(table_attrs)}>"]
        if self._caption:
            parts.append(f"<caption>{self._caption}</caption>")
        parts.append("<thead>")
        parts.extend("<tr>" + "".join(row) + "</tr>" for row in self._head)
        parts.append("</thead>")
        parts.append("<tbody>")
        parts.extend("<tr>" + "".join(row) + "</tr>" for row in self._body)
        parts.append("</tbody>")
        parts.append("</table>")
        return "".join(parts)
