"""Cartesian combination and merging of partial records.

Provides cartesian() to pick one element from each axis, merge() to fold a
combination into one record, and cartesian_merge() which composes the two.
"""

from __future__ import annotations

from itertools import product
from typing import List, Optional, Sequence, Tuple, TypeVar

from buildmatrix.errors import ExpansionLimitError
from buildmatrix.model.record import PartialRecord

__all__ = [
    "cartesian",
    "merge",
    "cartesian_merge",
]

T = TypeVar("T")


def cartesian(*sequences: Sequence[T], limit: Optional[int] = None) -> List[Tuple[T, ...]]:
    """Return every combination taking one element from each sequence.

    Empty sequences are skipped rather than emptying the product: an axis with
    no variation adds no constraint. With no non-empty sequence the result is
    a single empty combination, the identity of the product.

    Args:
        sequences: Axes to combine. Tuple positions follow argument order.
        limit: Maximum number of combinations allowed (optional).

    Returns:
        List of tuples, one per combination.

    Raises:
        ExpansionLimitError: If the product would exceed `limit`.

    Examples:
        >>> cartesian(["a", "b"], [], [1, 2])
        [('a', 1), ('a', 2), ('b', 1), ('b', 2)]
        >>> cartesian([], [])
        [()]
    """
    axes = [seq for seq in sequences if len(seq) > 0]

    if limit is not None:
        size = 1
        for axis in axes:
            size *= len(axis)
        if size > limit:
            raise ExpansionLimitError(
                f"Cartesian product would create {size} combinations "
                f"(limit: {limit}). Consider splitting the matrix or using "
                f"'$if' to prune axes."
            )

    return list(product(*axes))


def merge(partials: Sequence[PartialRecord]) -> PartialRecord:
    """Fold partial records left to right into one record.

    Later fields overwrite earlier ones with the same name. Predicates are
    appended in order, so a condition is never lost to a later overwrite.
    """
    result = PartialRecord()
    for partial in partials:
        result = result.merged_with(partial)
    return result


def cartesian_merge(
    *axes: Sequence[PartialRecord], limit: Optional[int] = None
) -> List[PartialRecord]:
    """Combine independent axes of partial records into merged records.

    Example:
        label: [a, b] + os: [mac, linux] -> (a, mac), (a, linux), (b, mac), (b, linux)
    """
    return [merge(combo) for combo in cartesian(*axes, limit=limit)]
