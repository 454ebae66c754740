"""Mask-reduce deduplication of evaluated matrix records.

A record masks another when it carries every field of the other with the
same value. Exact duplicates are dropped and less specific records are
replaced by more specific ones, so a general entry plus narrower overrides
reduce to the minimal set of effective combinations.

Values are compared by their textual form (`True` and `"true"` are the same
value here, as are `1.0` and `"1"`).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from buildmatrix.logging import get_logger
from buildmatrix.types.base import MaskRelation

__all__ = [
    "mask_relation",
    "mask_reduce",
]

logger = get_logger(__name__)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    # 1.0 reads as "1", like the JSON spelling of the number
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def mask_relation(item: Mapping[str, Any], existing: Mapping[str, Any]) -> MaskRelation:
    """Classify how `item` relates to an already accepted record.

    Returns:
        EQUAL if both have the same fields and values, SUPERSET if `item` has
        strictly more fields and agrees on all of `existing`'s, NO otherwise.
    """
    if len(existing) > len(item):
        return MaskRelation.NO
    for key, value in existing.items():
        if key not in item or _text(item[key]) != _text(value):
            return MaskRelation.NO
    return MaskRelation.EQUAL if len(item) == len(existing) else MaskRelation.SUPERSET


def mask_reduce(records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop duplicates and records made redundant by more specific ones.

    Each incoming record is compared with every accepted record in order. An
    exact duplicate is discarded; accepted records it is a strict superset of
    are removed. Survivors keep their input order.

    Example:
        >>> mask_reduce([{"a": "1"}, {"a": "1", "b": "2"}, {"a": "1", "b": "2"}])
        [{'a': '1', 'b': '2'}]
    """
    accepted: List[Dict[str, Any]] = []
    total = 0
    # O(n^2); matrices are expected to stay small
    for item in records:
        total += 1
        survivors: List[Dict[str, Any]] = []
        duplicate = False
        for idx, existing in enumerate(accepted):
            relation = mask_relation(item, existing)
            if relation is MaskRelation.EQUAL:
                duplicate = True
                survivors.extend(accepted[idx:])
                break
            if relation is MaskRelation.SUPERSET:
                continue
            survivors.append(existing)
        if not duplicate:
            survivors.append(item)
        accepted = survivors

    logger.debug("Mask-reduced %d record(s) to %d", total, len(accepted))
    return accepted
