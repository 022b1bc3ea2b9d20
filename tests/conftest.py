from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import pytest

from jsonstat_table.core.catalog import DimensionCatalog
from jsonstat_table.core.sink import CellSink


def _integer() -> Dict[str, Any]:
    return {
        "version": "2.0",
        "class": "dataset",
        "label": "Integer cube",
        "id": ["A", "B", "C", "D"],
        "size": [3, 2, 4, 2],
        "dimension": {
            "A": {"label": "Dim A", "category": {"index": ["a1", "a2", "a3"]}},
            "B": {"label": "Dim B", "category": {"index": {"b1": 0, "b2": 1}}},
            "C": {
                "label": "Dim C",
                "category": {
                    "index": ["c1", "c2", "c3", "c4"],
                    "label": {"c1": "C one", "c2": "C two", "c3": "C three", "c4": "C four"},
                },
            },
            "D": {"label": "Dim D", "category": {"index": ["d1", "d2"]}},
        },
        "value": list(range(1, 49)),
    }


def _volume() -> Dict[str, Any]:
    values: List[Any] = [round(i * 0.5, 1) for i in range(216)]
    values[0] = 3.8
    values[1] = 9
    values[44] = 7
    return {
        "version": "2.0",
        "class": "dataset",
        "label": "Standing volume by diameter class, species and region",
        "id": ["GRID", "UNIT", "BHDKL", "BAUMART", "PRODREG", "PAR"],
        "size": [1, 1, 6, 3, 6, 2],
        "dimension": {
            "GRID": {
                "label": "grid",
                "category": {"label": {"N4P12345": "grid NFI4 2009-2013"}},
            },
            "UNIT": {
                "label": "unit of evaluation",
                "category": {"index": ["1"], "label": {"1": "total forest"}},
            },
            "BHDKL": {
                "label": "diameter classes",
                "category": {
                    "index": ["0", "1", "2", "3", "4", "999999"],
                    "label": {
                        "0": "12-16 cm",
                        "1": "16-24 cm",
                        "2": "24-36 cm",
                        "3": "36-51 cm",
                        "4": "52+ cm",
                        "999999": "total",
                    },
                },
            },
            "BAUMART": {
                "label": "tree species",
                "category": {
                    "index": ["1", "2", "999999"],
                    "label": {"1": "conifers", "2": "broadleaves", "999999": "total"},
                },
            },
            "PRODREG": {
                "label": "production region",
                "category": {
                    "index": ["1", "2", "3", "4", "5", "999999"],
                    "label": {
                        "1": "Jura",
                        "2": "Plateau",
                        "3": "Pre-Alps",
                        "4": "Alps",
                        "5": "Southern Alps",
                        "999999": "Switzerland",
                    },
                },
            },
            "PAR": {
                "label": "parameter",
                "category": {
                    "index": ["1", "2"],
                    "label": {"1": "volume [1000 m3]", "2": "error [%]"},
                    "unit": {"1": {"decimals": 1}, "2": {"decimals": 0}},
                },
            },
        },
        "value": values,
    }


def _oecd() -> Dict[str, Any]:
    return {
        "version": "2.0",
        "class": "dataset",
        "label": "Unemployment rate in the OECD countries",
        "id": ["concept", "area", "year"],
        "size": [1, 4, 3],
        "dimension": {
            "concept": {
                "label": "indicator",
                "category": {
                    "label": {"UNR": "unemployment rate"},
                    "unit": {"UNR": {"decimals": 1, "label": "%"}},
                },
            },
            "area": {
                "label": "OECD countries, EU15 and total",
                "category": {
                    "index": {"AT": 0, "BE": 1, "DE": 2, "OECD": 3},
                    "label": {"AT": "Austria", "BE": "Belgium", "DE": "Germany", "OECD": "total"},
                },
            },
            "year": {
                "label": "2003-2014",
                "category": {
                    "index": ["2012", "2013", "2014"],
                    "unit": {
                        "2012": {"decimals": 1},
                        "2013": {"decimals": 1},
                        "2014": {"decimals": 1},
                    },
                },
            },
        },
        "value": [4.3, 4.9, 5.0, 7.5, 8.4, 8.5, 5.4, 5.2, 5.0, 7.9, 7.9, None],
    }


INTEGER = _integer()
VOLUME = _volume()
OECD = _oecd()


@pytest.fixture
def integer() -> Dict[str, Any]:
    return copy.deepcopy(INTEGER)


@pytest.fixture
def volume() -> Dict[str, Any]:
    return copy.deepcopy(VOLUME)


@pytest.fixture
def oecd() -> Dict[str, Any]:
    return copy.deepcopy(OECD)


@pytest.fixture
def integer_catalog(integer) -> DimensionCatalog:
    return DimensionCatalog(integer)


@pytest.fixture
def volume_catalog(volume) -> DimensionCatalog:
    return DimensionCatalog(volume)


class RecordingSink(CellSink):
    """Keeps every call as a tuple, for asserting on what the layout emitted."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.caption: Optional[tuple] = None

    def set_caption(self, text, trusted):
        self.caption = (text, trusted)

    def begin_header_row(self, row_idx):
        self.calls.append(("begin_header", row_idx))

    def emit_label_header_cell(self, row_idx, col_idx, text, is_last_header_row):
        self.calls.append(("label_header", row_idx, col_idx, text, is_last_header_row))

    def emit_value_header_cell(self, row_idx, col_idx, text, colspan, is_dimension_row):
        self.calls.append(("value_header", row_idx, col_idx, text, colspan, is_dimension_row))

    def begin_body_row(self, row_idx):
        self.calls.append(("begin_body", row_idx))

    def emit_label_body_cell(self, row_idx, col_idx, text, rowspan, boundary, group_start):
        self.calls.append(("label_body", row_idx, col_idx, text, rowspan, boundary, group_start))

    def emit_value_body_cell(self, row_idx, col_idx, text, offset):
        self.calls.append(("value_body", row_idx, col_idx, text, offset))

    def result(self):
        return self

    def of_kind(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def recording_sink_factory():
    return RecordingSink
