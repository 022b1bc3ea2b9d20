from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import logging
import re

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from jsonstat_table.core.sink import GridSink

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 60

_NUMBER = re.compile(r"-?\d+(?:\.(\d+))?")

HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="top", wrap_text=True)
LABEL_ALIGNMENT = Alignment(horizontal="left", vertical="top")
VALUE_ALIGNMENT = Alignment(horizontal="right", vertical="top")


class ExcelSink(GridSink):
    """
    Writes the table to an openpyxl worksheet.

    The caption (if any) goes to cell A1 followed by an empty row. Column and
    row spans become merged cells. Header cells are centered, body label cells
    left aligned and value cells right aligned. Numeric value cells are
    written as numbers with a number format keeping their decimals; other
    text and the null label stay text. A trusted caption loses its markup.
    """

    def __init__(self, workbook: Optional[Workbook] = None, sheet_title: str = "table") -> None:
        super().__init__()
        self.workbook = workbook
        self.sheet_title = sheet_title
        self.numbers: Dict[Tuple[int, int], Tuple[Union[int, float], str]] = {}

    def start(self, geometry) -> None:
        super().start(geometry)
        self.numbers = {}

    def emit_value_body_cell(self, row_idx: int, col_idx: int, text: str, offset: int) -> None:
        super().emit_value_body_cell(row_idx, col_idx, text, offset)
        number = as_number(text)
        if number is not None:
            self.numbers[(self.num_header_rows + row_idx, col_idx)] = number

    @property
    def num_caption_rows(self) -> int:
        return 2 if self.caption else 0

    def result(self) -> Workbook:
        wb = self.workbook if self.workbook is not None else Workbook()
        ws = wb.active
        ws.title = self.sheet_title

        top = self.num_caption_rows + 1
        if self.caption:
            caption_cell = ws.cell(row=1, column=1, value=self.caption)
            caption_cell.font = Font(bold=True, size=12)
            caption_cell.alignment = Alignment(vertical="top")

        widths: Dict[int, int] = {}
        for (r, c), text in self.cells.items():
            cell = ws.cell(row=top + r, column=c + 1, value=text)
            if (r, c) in self.numbers:
                cell.value, cell.number_format = self.numbers[(r, c)]
            if r < self.num_header_rows:
                cell.alignment = HEADER_ALIGNMENT
                cell.font = Font(bold=True)
            elif c < self.geometry.num_label_cols:
                cell.alignment = LABEL_ALIGNMENT
            else:
                cell.alignment = VALUE_ALIGNMENT
            widths[c] = max(widths.get(c, 0), len(text))

        for r, c, rowspan, colspan in self.spans:
            ws.merge_cells(
                start_row=top + r,
                start_column=c + 1,
                end_row=top + r + rowspan - 1,
                end_column=c + colspan,
            )

        for c, width in widths.items():
            ws.column_dimensions[get_column_letter(c + 1)].width = min(width + 2, MAX_COLUMN_WIDTH)

        logger.debug("Wrote %d cells and %d merged ranges to sheet %s", len(self.cells), len(self.spans), ws.title)
        return wb


def as_number(text: str) -> Optional[Tuple[Union[int, float], str]]:
    """
    Number and number format of a formatted value cell, None for any other text.

    The number format keeps the decimals the text was formatted with, e.g.
    "3.8" -> (3.8, "0.0"), "9" -> (9, "0").
    """
    match = _NUMBER.fullmatch(text)
    if match is None:
        return None
    decimals = match.group(1)
    if decimals is None:
        return int(text), "0"
    return float(text), "0." + "0" * len(decimals)


def save_workbook(workbook: Workbook, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    logger.info("Saved workbook: %s", path)
    return path
