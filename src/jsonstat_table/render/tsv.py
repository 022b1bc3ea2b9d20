from __future__ import annotations

from typing import List

from jsonstat_table.core.sink import GridSink


class TsvSink(GridSink):
    """
    Renders the table as separated text, tab separated by default.

    The caption (if any) is written on the first line followed by an empty
    line. Separator characters inside cell text are replaced by spaces so
    that the grid stays rectangular.
    """

    def __init__(self, separator_col: str = "\t", separator_row: str = "\n") -> None:
        super().__init__()
        self.separator_col = separator_col
        self.separator_row = separator_row

    def _clean(self, text: str) -> str:
        for sep in (self.separator_col, self.separator_row, "\r", "\n"):
            if sep:
                text = text.replace(sep, " ")
        return text

    def result(self) -> str:
        lines: List[str] = []
        if self.caption:
            lines.append(self._clean(self.caption))
            lines.append("")
        for row in self.rows():
            lines.append(self.separator_col.join(self._clean(cell) for cell in row))
        return self.separator_row.join(lines) + self.separator_row
