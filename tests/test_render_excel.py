from __future__ import annotations

from openpyxl import load_workbook

from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.render import render_workbook


def test_workbook_layout(integer_catalog) -> None:
    wb = render_workbook(integer_catalog)
    ws = wb.active
    assert ws.title == "table"
    assert ws["A1"].value == "Integer cube"
    assert ws["C3"].value == "Dim C"
    assert ws["C4"].value == "C one"
    assert ws["A6"].value == "Dim A"
    assert ws["A7"].value == "a1"
    assert ws["C7"].value == 1
    assert ws["C7"].number_format == "0"

    merged = {str(r) for r in ws.merged_cells.ranges}
    assert "C3:J3" in merged
    assert "C4:D4" in merged
    assert "A7:A8" in merged

    assert ws["C3"].alignment.horizontal == "center"
    assert ws["A7"].alignment.horizontal == "left"
    assert ws["C7"].alignment.horizontal == "right"
    assert ws.column_dimensions["A"].width > 0


def test_workbook_without_caption(integer) -> None:
    del integer["label"]
    ws = render_workbook(DimensionCatalog(integer), use_row_spans=False).active
    assert ws["C1"].value == "Dim C"
    assert ws["A5"].value == "a1"
    ranges = list(ws.merged_cells.ranges)
    assert ranges
    assert all(r.max_row <= 4 for r in ranges)


def test_workbook_saved(integer_catalog, tmp_path) -> None:
    path = tmp_path / "out" / "cube.xlsx"
    render_workbook(integer_catalog, path=path, sheet_title="cube")
    assert path.exists()
    ws = load_workbook(path)["cube"]
    assert ws["A1"].value == "Integer cube"


def test_values_are_numbers_with_their_decimals(volume_catalog) -> None:
    ws = render_workbook(volume_catalog, exclude_one_dim=True, num_row_dim=2).active
    volume = ws.cell(row=7, column=3)
    assert isinstance(volume.value, float)
    assert volume.value == 3.8
    assert volume.number_format == "0.0"

    error = ws.cell(row=7, column=4)
    assert error.value == 9
    assert error.number_format == "0"


def test_null_label_and_strings_stay_text(integer) -> None:
    integer["value"][0] = None
    integer["value"][1] = "confidential"
    ws = render_workbook(DimensionCatalog(integer), null_label="..").active
    assert ws["C7"].value == ".."
    assert ws["D7"].value == "confidential"
    assert ws["E7"].value == 3


def test_caption_markup_is_stripped(integer_catalog) -> None:
    ws = render_workbook(integer_catalog, caption="<em>Cube</em> &amp; more").active
    assert ws["A1"].value == "Cube & more"
