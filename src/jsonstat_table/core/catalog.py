from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import copy
import logging
import math

import pandas as pd

from jsonstat_table.core.shape import AxesError, ShapeError, get_index, permute, transpose

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("id", "size", "dimension", "value")


class CatalogError(LookupError):
    """Raised when dimension or category metadata cannot be found."""


def _dense_values(value: Any, total: int) -> List[Any]:
    """
    Return the JSON-stat value property as a dense list.

    JSON-stat 2.0 allows a sparse object keyed by the (stringified) offset;
    offsets that are missing from it are null.
    """
    if isinstance(value, Mapping):
        dense: List[Any] = [None] * total
        for key, val in value.items():
            try:
                idx = int(key)
            except (TypeError, ValueError) as exc:
                raise CatalogError(f"Sparse value key {key!r} is not an integer offset.") from exc
            if idx < 0 or idx >= total:
                raise ShapeError(f"Sparse value offset {idx} out of range ({total} values).")
            dense[idx] = val
        return dense
    return list(value)


class DimensionCatalog:
    """
    Read-only view over a JSON-stat dataset.

    Wraps the parsed JSON (a dict with 'id', 'size', 'dimension', 'value' and
    an optional 'label') and answers the questions the table layout needs:
    dimension ids and labels, ordered category ids, category labels and the
    number of decimals of a category's unit.

    transpose() returns a new catalog; an instance is never mutated after
    construction, so concurrent renders may share it.
    """

    def __init__(self, data: Mapping[str, Any]) -> None:
        missing = [k for k in REQUIRED_KEYS if k not in data]
        if missing:
            raise CatalogError(f"JSON-stat dataset is missing required properties: {missing}")

        ids = list(data["id"])
        sizes = [int(s) for s in data["size"]]
        if len(ids) != len(sizes):
            raise ShapeError(f"Dataset has {len(ids)} dimension ids but {len(sizes)} sizes.")
        if any(s < 1 for s in sizes):
            raise ShapeError(f"Dimension sizes must be at least 1, got {sizes}.")

        total = math.prod(sizes)
        values = _dense_values(data["value"], total)
        if len(values) != total:
            raise ShapeError(f"Dataset has {len(values)} values, shape {sizes} requires {total}.")

        self._data: Dict[str, Any] = dict(data)
        self._data["id"] = ids
        self._data["size"] = sizes
        self._data["value"] = values
        self._category_ids: Dict[str, List[str]] = {}

    # ------------------------------------------------------------------
    # Dataset level
    # ------------------------------------------------------------------

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    @property
    def ids(self) -> List[str]:
        return list(self._data["id"])

    @property
    def sizes(self) -> List[int]:
        return list(self._data["size"])

    @property
    def values(self) -> List[Any]:
        return self._data["value"]

    @property
    def label(self) -> Optional[str]:
        """Optional dataset label, used as the table caption."""
        return self._data.get("label")

    @property
    def num_values(self) -> int:
        return len(self._data["value"])

    def value(self, offset: int) -> Any:
        if offset < 0 or offset >= self.num_values:
            raise ShapeError(f"Value offset {offset} out of range ({self.num_values} values).")
        return self._data["value"][offset]

    def dimension_sizes(self, exclude_leading_ones: bool = False) -> List[int]:
        """
        Return the list of dimension sizes.

        With exclude_leading_ones, dimensions of size one are dropped only as
        long as every dimension before them is of size one as well:
          [1, 1, 3, 2, 5] -> [3, 2, 5]
          [1, 1, 3, 2, 1] -> [3, 2, 1]
        """
        sizes = self.sizes
        if not exclude_leading_ones:
            return sizes
        start = 0
        while start < len(sizes) and sizes[start] == 1:
            start += 1
        return sizes[start:]

    # ------------------------------------------------------------------
    # Dimensions and categories
    # ------------------------------------------------------------------

    def _dimension(self, dim_id: str) -> Mapping[str, Any]:
        try:
            return self._data["dimension"][dim_id]
        except KeyError as exc:
            raise CatalogError(f"Dimension {dim_id!r} not found in dataset metadata.") from exc

    def _category(self, dim_id: str) -> Mapping[str, Any]:
        dim = self._dimension(dim_id)
        if "category" not in dim:
            raise CatalogError(f"Dimension {dim_id!r} has no category property.")
        return dim["category"]

    def dimension_id(self, index: int) -> str:
        try:
            return self._data["id"][index]
        except IndexError as exc:
            raise CatalogError(
                f"Dimension index {index} out of range ({len(self._data['id'])} dimensions)."
            ) from exc

    def dimension_label(self, dim_id: str) -> str:
        dim = self._dimension(dim_id)
        # the label property is optional in JSON-stat, the id is the fallback
        return dim.get("label", dim_id)

    def category_ids(self, dim_id: str) -> List[str]:
        """
        Ordered category ids of a dimension.

        category.index may be an array of ids or an object mapping id to
        position. Without an index, the dimension has a single category and
        the label object holds its id.
        """
        cached = self._category_ids.get(dim_id)
        if cached is not None:
            return cached

        category = self._category(dim_id)
        index = category.get("index")
        if index is None:
            labels = category.get("label") or {}
            if len(labels) != 1:
                logger.warning(
                    "Dimension %s has no category index and %d labels; using label order.",
                    dim_id,
                    len(labels),
                )
            ids = list(labels.keys())
        elif isinstance(index, Mapping):
            ids = [k for k, _ in sorted(index.items(), key=lambda item: item[1])]
        else:
            ids = list(index)

        self._category_ids[dim_id] = ids
        return ids

    def category_id(self, dim_id: str, position: int) -> str:
        ids = self.category_ids(dim_id)
        if position < 0 or position >= len(ids):
            raise CatalogError(
                f"Category position {position} out of range for dimension {dim_id!r} ({len(ids)} categories)."
            )
        return ids[position]

    def category_label(self, dim_id: str, category_id: str) -> str:
        category = self._category(dim_id)
        labels = category.get("label")
        if labels is None:
            # without a label property the index keys are the labels
            return category_id
        try:
            return labels[category_id]
        except KeyError as exc:
            raise CatalogError(f"Category {category_id!r} has no label in dimension {dim_id!r}.") from exc

    def has_decimals(self, dim_id: str) -> bool:
        """When the unit property is present, JSON-stat 2.0 requires decimals."""
        return "unit" in self._category(dim_id)

    def decimals_for(self, dim_id: str, category_id: str) -> Optional[int]:
        unit = self._category(dim_id).get("unit") or {}
        decimals = (unit.get(category_id) or {}).get("decimals")
        return int(decimals) if decimals is not None else None

    def categories_frame(self, dim_id: str) -> pd.DataFrame:
        """
        Normalized category metadata of one dimension.

        Columns:
          - category_id
          - position   (0-based order in the dimension)
          - label
          - decimals   (nullable Int64, from the category unit)
        """
        ids = self.category_ids(dim_id)
        out = pd.DataFrame()
        out["category_id"] = pd.Series(ids, dtype="object")
        out["position"] = range(len(ids))
        out["label"] = [self.category_label(dim_id, cid) for cid in ids]
        out["decimals"] = pd.array([self.decimals_for(dim_id, cid) for cid in ids], dtype="Int64")
        return out

    # ------------------------------------------------------------------
    # Axis permutation
    # ------------------------------------------------------------------

    def transpose(self, axes: Sequence[int]) -> "DimensionCatalog":
        """
        Return a new catalog with the axes permuted.

        Reorders the value array, the dimension ids and the sizes. To undo,
        transpose the result with shape.inverse_axes(axes).
        """
        axes = list(axes)
        data = copy.copy(self._data)
        data["value"] = transpose(self._data["value"], self._data["size"], axes)
        data["id"] = permute(self._data["id"], axes)
        data["size"] = permute(self._data["size"], axes)
        logger.info("Transposed dataset %s -> %s", self._data["id"], data["id"])
        return DimensionCatalog(data)

    def transpose_ids(self, ids: Sequence[str]) -> "DimensionCatalog":
        """Transpose so that the dimensions appear in the order of ``ids``."""
        axes = get_index(ids, self._data["id"])
        if any(a is None for a in axes):
            unknown = [i for i, a in zip(ids, axes) if a is None]
            raise AxesError(f"Unknown dimension ids {unknown}; dataset has {self._data['id']}.")
        return self.transpose(axes)  # type: ignore[arg-type]
