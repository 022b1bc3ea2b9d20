"""
Core indexing and layout layer.

This package contains:
- shape: strides, linear <-> subscript conversion and transposition of flat arrays
- catalog: read-only view of a JSON-stat dataset (dimensions, categories, units)
- partition: split of the dimensions into row and column dimensions
- formatting: null labels and decimals of value cells
- layout: the table layout engine and its options
- sink: the CellSink interface the layout emits cells to
- loader: read datasets from files, URLs or JSON text
"""
