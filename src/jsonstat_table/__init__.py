"""
Lay out multi-dimensional JSON-stat datasets as two-dimensional tables.

    from jsonstat_table import load_catalog, render_html

    catalog = load_catalog("data/samples/integer.json")
    html = render_html(catalog, num_row_dim=2)
"""
from jsonstat_table.config import APP_VERSION as __version__
from jsonstat_table.core.catalog import CatalogError, DimensionCatalog
from jsonstat_table.core.layout import LayoutOptions, TableGeometry, TableLayoutEngine
from jsonstat_table.core.loader import LoaderError, load_catalog, load_jsonstat
from jsonstat_table.core.partition import PartitionError
from jsonstat_table.core.shape import AxesError, ShapeError
from jsonstat_table.core.sink import CellSink, GridSink
from jsonstat_table.render import (
    render_frame,
    render_html,
    render_tsv,
    render_values_frame,
    render_workbook,
)

__all__ = [
    "AxesError",
    "CatalogError",
    "CellSink",
    "DimensionCatalog",
    "GridSink",
    "LayoutOptions",
    "LoaderError",
    "PartitionError",
    "ShapeError",
    "TableGeometry",
    "TableLayoutEngine",
    "__version__",
    "load_catalog",
    "load_jsonstat",
    "render_frame",
    "render_html",
    "render_tsv",
    "render_values_frame",
    "render_workbook",
]
