from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import logging

logger = logging.getLogger(__name__)


class PartitionError(ValueError):
    """Raised when the requested number of row dimensions does not fit the shape."""


@dataclass(frozen=True)
class Partition:
    """
    Split of the renderable dimension sizes into row and column dimensions.

    row_dims own the nested row headers (label columns), col_dims own the
    nested column headers. num_one_dim counts the leading size-one dimensions
    that were left out of both, so renderable index i maps back to the
    dataset's dimension num_one_dim + i.
    """
    row_dims: List[int]
    col_dims: List[int]
    num_one_dim: int

    @property
    def num_row_dim(self) -> int:
        return len(self.row_dims)

    @property
    def shape(self) -> List[int]:
        return self.row_dims + self.col_dims

    def absolute_index(self, renderable_index: int) -> int:
        return self.num_one_dim + renderable_index


def auto_row_dim_count(sizes: Sequence[int]) -> int:
    """
    Default number of row dimensions.

    All dimensions except the last two are used for rows. With fewer than
    three dimensions only the first one is.
    """
    return 1 if len(sizes) < 3 else len(sizes) - 2


def partition(
    sizes: Sequence[int],
    num_row_dim: Optional[int] = None,
    total_dims: Optional[int] = None,
) -> Partition:
    """
    Partition the renderable sizes into row and column dimensions.

    Parameters:
      - sizes:       renderable dimension sizes (leading ones possibly removed)
      - num_row_dim: number of row dimensions, auto-derived when None
      - total_dims:  number of dimensions of the dataset including the removed
                     leading ones (defaults to len(sizes))
    """
    sizes = list(sizes)
    total = len(sizes) if total_dims is None else int(total_dims)
    if total < len(sizes):
        raise PartitionError(f"total_dims={total} is smaller than the {len(sizes)} renderable dimensions.")

    n = auto_row_dim_count(sizes) if num_row_dim is None else int(num_row_dim)
    # an empty shape still yields the auto count of 1, which maps to no rows
    if num_row_dim is None:
        n = min(n, len(sizes))
    if n < 0 or n > len(sizes):
        raise PartitionError(
            f"num_row_dim={n} out of range: the table has {len(sizes)} renderable dimensions {sizes}."
        )

    result = Partition(row_dims=sizes[:n], col_dims=sizes[n:], num_one_dim=total - len(sizes))
    logger.debug("Partitioned %s into rows=%s cols=%s", sizes, result.row_dims, result.col_dims)
    return result
