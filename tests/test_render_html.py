from __future__ import annotations

import math
from html.parser import HTMLParser
from typing import List

import pytest

from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.render import render_html


class _TableParser(HTMLParser):
    """Counts rows and cells per table section."""

    def __init__(self) -> None:
        super().__init__()
        self.section = ""
        self.rows = {"thead": [], "tbody": []}
        self.cells: List[dict] = []

    def handle_starttag(self, tag, attrs):
        if tag in ("thead", "tbody"):
            self.section = tag
        elif tag == "tr":
            self.rows[self.section].append([])
        elif tag in ("th", "td"):
            cell = {"tag": tag, "section": self.section, **dict(attrs), "text": ""}
            self.rows[self.section][-1].append(cell)
            self.cells.append(cell)

    def handle_data(self, data):
        if self.cells:
            self.cells[-1]["text"] += data


def _parse(html: str) -> _TableParser:
    parser = _TableParser()
    parser.feed(html)
    parser.close()
    return parser


def test_table_element(integer_catalog) -> None:
    html = render_html(integer_catalog)
    assert html.startswith(
        '<table class="jst-viz numRowDims2 lastDimSize2" data-shape="3,2,4,2" data-num-row-dim="2">'
    )
    assert html.endswith("</tbody></table>")
    assert "<caption>Integer cube</caption>" in html


def test_header_scopes_and_spans(integer_catalog) -> None:
    table = _parse(render_html(integer_catalog))
    head = table.rows["thead"]
    assert len(head) == 4
    assert head[0][2] == {"tag": "th", "section": "thead", "scope": "colgroup", "colspan": "8", "text": "Dim C"}
    assert [c.get("scope") for c in head[3][:2]] == ["col", "col"]
    assert "scope" not in head[0][0]
    assert all(c.get("scope") == "col" and "colspan" not in c for c in head[3][2:])


def test_body_label_cells(integer_catalog) -> None:
    table = _parse(render_html(integer_catalog))
    body = table.rows["tbody"]
    assert len(body) == 6
    first = body[0][0]
    assert first["scope"] == "rowgroup"
    assert first["rowspan"] == "2"
    assert first["class"] == "rowdim1 first"
    # the second row has no cell for the spanned first dimension
    assert body[1][0]["class"] == "rowdim2 last"
    assert len(body[1]) == 1 + 8
    assert body[4][0]["class"] == "rowdim1 last"


def test_without_row_spans_every_row_is_complete(integer_catalog) -> None:
    table = _parse(render_html(integer_catalog, use_row_spans=False))
    assert all(len(row) == 2 + 8 for row in table.rows["tbody"])
    # the first row dimension spans two rows even when its labels are repeated
    assert all(row[0]["scope"] == "rowgroup" and row[1]["scope"] == "row" for row in table.rows["tbody"])
    assert not any("rowspan" in c for row in table.rows["tbody"] for c in row)


def test_dataset_markup_is_escaped(integer) -> None:
    markup = "<i>Test:</i> cell"
    integer["value"][3] = markup
    integer["dimension"]["A"]["label"] = markup
    integer["label"] = "<b>caption</b>"

    html = render_html(DimensionCatalog(integer))
    assert markup not in html
    assert "<td>&lt;i&gt;Test:&lt;/i&gt; cell</td>" in html
    assert '<th scope="col">&lt;i&gt;Test:&lt;/i&gt; cell</th>' in html
    assert "<caption>&lt;b&gt;caption&lt;/b&gt;</caption>" in html


def test_explicit_caption_is_not_escaped(integer_catalog) -> None:
    html = render_html(integer_catalog, caption="<em>Cube</em> of integers")
    assert "<caption><em>Cube</em> of integers</caption>" in html


def test_null_values_do_not_produce_void_elements(integer) -> None:
    integer["value"][1] = None
    html = render_html(DimensionCatalog(integer))
    assert "<td/>" not in html
    assert "<th/>" not in html
    assert "<td></td>" in html


def test_decimals(volume_catalog) -> None:
    table = _parse(render_html(volume_catalog))
    values = [c["text"] for c in table.cells if c["tag"] == "td"]
    assert values[0] == "3.8"
    assert values[1] == "9"
    assert values[44] == "7.0"

    table = _parse(render_html(volume_catalog, exclude_one_dim=True))
    values = [c["text"] for c in table.cells if c["tag"] == "td"]
    assert values[44] == "7.0"


@pytest.mark.parametrize("num_row_dim", range(7))
def test_rows_and_columns_per_num_row_dim(volume_catalog, num_row_dim) -> None:
    size = volume_catalog.sizes
    table = _parse(render_html(volume_catalog, num_row_dim=num_row_dim))
    assert len(table.rows["tbody"]) == math.prod(size[:num_row_dim])
    assert len(table.rows["thead"][-1]) == math.prod(size[num_row_dim:]) + num_row_dim


def test_exclude_one_dim(volume_catalog) -> None:
    table = _parse(render_html(volume_catalog, num_row_dim=2, exclude_one_dim=True))
    size = volume_catalog.sizes
    assert len(table.rows["tbody"]) == math.prod(size[:4])
    assert len(table.rows["thead"][-1]) == math.prod(size[4:]) + 2
    assert table.rows["tbody"][0][0]["text"] == "12-16 cm"


def test_no_label_last_dim(integer_catalog) -> None:
    table = _parse(render_html(integer_catalog, num_row_dim=2, no_label_last_dim=True))
    assert len(table.rows["thead"]) == 3


def test_css_class(integer_catalog) -> None:
    assert render_html(integer_catalog, css_class="stats").startswith('<table class="stats numRowDims2')


def test_innermost_row_dimension_is_scoped_row(volume_catalog) -> None:
    table = _parse(render_html(volume_catalog, exclude_one_dim=True, num_row_dim=1))
    assert all(row[0]["scope"] == "row" for row in table.rows["tbody"])
