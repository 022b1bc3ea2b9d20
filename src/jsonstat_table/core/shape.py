"""
Shape arithmetic for row-major N-dimensional value arrays.

Modelled after the NumPy notions of shape, strides and transpose, but working
on plain Python lists so a JSON-stat ``value`` array can be reindexed without
converting it first.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

import logging
import math

logger = logging.getLogger(__name__)


class ShapeError(IndexError):
    """Raised when an offset or a value count does not fit the shape."""


class AxesError(ValueError):
    """Raised when an axes list is not a permutation of [0, N-1]."""


def strides(shape: Sequence[int]) -> List[int]:
    """
    Calculate the strides of a row-major shape.

    The last dimension varies fastest, e.g. shape [4, 5, 1, 7, 3] has the
    strides [105, 21, 21, 3, 1].
    """
    out = [1] * len(shape)
    size = 1
    for i in range(len(shape) - 1, -1, -1):
        out[i] = size
        size *= shape[i]
    return out


def linear_to_subscript(shape: Sequence[int], offset: int) -> List[int]:
    """
    Convert a linear (row-major) offset to one subscript per axis.

    Called for offsets 0, 1, 2, ... with shape [4, 2, 3, 2] this yields
    [0,0,0,0], [0,0,0,1], [0,0,1,0], ..., [3,1,2,1].
    """
    total = math.prod(shape)
    if offset < 0 or offset >= total:
        raise ShapeError(f"Offset {offset} out of range for shape {list(shape)} ({total} values).")

    sub = [0] * len(shape)
    for i in range(len(shape) - 1, -1, -1):
        offset, sub[i] = divmod(offset, shape[i])
    return sub


def subscript_to_linear(stride_list: Sequence[int], subscript: Sequence[int]) -> int:
    """Convert subscripts back to the linear offset, see linear_to_subscript()."""
    return sum(s * st for s, st in zip(subscript, stride_list))


def permute(seq: Sequence[Any], axes: Sequence[int]) -> List[Any]:
    """Gather ``seq`` in the order given by ``axes``: result[i] = seq[axes[i]]."""
    return [seq[a] for a in axes]


def validate_axes(axes: Sequence[int], ndim: int) -> None:
    if len(axes) != ndim:
        raise AxesError(f"Expected {ndim} axes, got {len(axes)}: {list(axes)}")
    if sorted(axes) != list(range(ndim)):
        raise AxesError(f"Axes {list(axes)} are not a permutation of [0..{ndim - 1}].")


def inverse_axes(axes: Sequence[int]) -> List[int]:
    """
    Return the permutation that undoes ``axes``.

    Transposing with the same axes twice only restores the original order when
    the permutation is its own inverse (e.g. a pairwise swap). Use this to undo
    any other transpose.
    """
    validate_axes(axes, len(axes))
    inv = [0] * len(axes)
    for i, a in enumerate(axes):
        inv[a] = i
    return inv


def transpose(values: Sequence[Any], shape: Sequence[int], axes: Sequence[int]) -> List[Any]:
    """
    Permute the axes of a flat row-major array.

    Parameters:
      - values: flat array in row-major order
      - shape:  shape of ``values`` before transposing
      - axes:   permutation of [0, 1, ..., N-1]

    Returns the values reordered for the shape permute(shape, axes).
    """
    validate_axes(axes, len(shape))
    total = math.prod(shape)
    if len(values) != total:
        raise ShapeError(f"Got {len(values)} values for shape {list(shape)}, expected {total}.")

    shape_t = permute(shape, axes)
    strides_t = permute(strides(shape), axes)
    return [values[subscript_to_linear(strides_t, linear_to_subscript(shape_t, i))] for i in range(total)]


def get_index(needle: Sequence[Any], haystack: Sequence[Any]) -> List[Optional[int]]:
    """
    Return the position of each needle item in the haystack.

    Items that are not found map to None. Useful to turn a wished-for order of
    dimension ids into an axes list.
    """
    hay = list(haystack)
    out: List[Optional[int]] = []
    for item in needle:
        try:
            out.append(hay.index(item))
        except ValueError:
            out.append(None)
    return out
