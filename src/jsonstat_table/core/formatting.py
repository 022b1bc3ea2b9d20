from __future__ import annotations

from typing import Any, Optional

from jsonstat_table.config import JSONSTAT_NULL_LABEL
from jsonstat_table.core.catalog import DimensionCatalog


def format_decimal(value: Any, decimals: int) -> Any:
    """Format ints and floats with exactly ``decimals`` fractional digits, pass anything else through."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.{decimals}f}"
    return value


class ValueFormatter:
    """
    Turns raw JSON-stat values and labels into cell text.

    Null values become null_label (an empty string by default) so that no
    backend ends up with a void cell.
    """

    def __init__(self, catalog: DimensionCatalog, null_label: Optional[str] = None) -> None:
        self.catalog = catalog
        self.null_label = JSONSTAT_NULL_LABEL if null_label is None else null_label
        # the unit dimension is always the dataset's last one, whatever the table partition is
        self._unit_dim_idx = len(catalog.ids) - 1
        self._unit_dim_id = catalog.dimension_id(self._unit_dim_idx) if catalog.ids else None
        self._unit_dim_size = catalog.sizes[self._unit_dim_idx] if catalog.ids else 1
        self._has_decimals = self._unit_dim_id is not None and catalog.has_decimals(self._unit_dim_id)

    def format_null(self, value: Any) -> str:
        return self.null_label if value is None else str(value)

    def format_header_cell(self, text: Optional[str]) -> str:
        return self.format_null(text)

    def decimals_at(self, offset: int) -> Optional[int]:
        if not self._has_decimals:
            return None
        category_id = self.catalog.category_id(self._unit_dim_id, offset % self._unit_dim_size)
        return self.catalog.decimals_for(self._unit_dim_id, category_id)

    def format_value_cell(self, value: Any, offset: int) -> str:
        decimals = self.decimals_at(offset)
        if decimals is not None:
            value = format_decimal(value, decimals)
        return self.format_null(value)
