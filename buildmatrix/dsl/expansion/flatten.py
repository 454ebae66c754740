"""Recursive flattening of a matrix document into partial records.

Two mutually recursive walks:

- flatten() reads a document in object context: arrays are unions of
  alternatives, mapping keys are independent axes combined by Cartesian
  product, `$multiply` combines a list of sub-documents and `$if` attaches
  predicates.
- flatten_keyed() reads a document in value context, i.e. "which values can
  this field take": scalars, unions, `$dynamic` and `$value` markers, or a
  mapping whose keys are the candidate values with attached sub-documents.

The input document is never mutated.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from buildmatrix.config import DEFAULT_CONFIG, ExpansionConfig
from buildmatrix.dsl.expansion.cartesian import cartesian_merge
from buildmatrix.errors import MatrixStructureError
from buildmatrix.logging import get_logger
from buildmatrix.model.record import PartialRecord
from buildmatrix.types.base import (
    DYNAMIC_KEY,
    IF_KEY,
    MULTIPLY_KEY,
    RESERVED_KEYS,
    VALUE_KEY,
    Deferred,
)
from buildmatrix.utils.keys import normalize_mapping_keys

__all__ = [
    "flatten",
    "flatten_keyed",
]

logger = get_logger(__name__)


def flatten(
    document: Any, config: Optional[ExpansionConfig] = None
) -> List[PartialRecord]:
    """Flatten an object-context document into partial records.

    Args:
        document: Mapping or sequence of mappings.
        config: Expansion settings; defaults to DEFAULT_CONFIG.

    Returns:
        Partial records, one per combination, in document order.

    Raises:
        MatrixStructureError: If the document has an unexpected shape.
        ExpansionLimitError: If a product exceeds `config.max_combinations`.
    """
    cfg = config or DEFAULT_CONFIG
    records = _flatten(document, cfg, "")
    logger.debug("Flattened document into %d partial record(s)", len(records))
    return records


def flatten_keyed(
    field: str, document: Any, config: Optional[ExpansionConfig] = None
) -> List[PartialRecord]:
    """Flatten a value-context document for `field` into partial records.

    Args:
        field: Output field name the values belong to.
        document: Scalar, sequence or mapping describing the field's values.
        config: Expansion settings; defaults to DEFAULT_CONFIG.

    Returns:
        Partial records, each setting `field` to one alternative.

    Raises:
        MatrixStructureError: If the document has an unexpected shape.
    """
    return _flatten_keyed(field, document, config or DEFAULT_CONFIG, field)


# ---------------------------------------------------------------------------
# Object context
# ---------------------------------------------------------------------------


def _flatten(document: Any, cfg: ExpansionConfig, path: str) -> List[PartialRecord]:
    if _is_sequence(document):
        records: List[PartialRecord] = []
        for idx, item in enumerate(document):
            records.extend(_flatten(item, cfg, f"{path}[{idx}]"))
        return records

    if isinstance(document, Mapping):
        entries = _entries(document, cfg, path)
        if not entries:
            return []

        # label: [a, b] + os: [mac, linux] -> every (label, os) pair
        axes: List[List[PartialRecord]] = []
        for key, value in entries.items():
            if key == MULTIPLY_KEY:
                axes.append(_flatten_multiply(value, cfg, _join(path, key)))
            elif key == IF_KEY:
                # $if: [a, b] -> one alternative per predicate (either may hold)
                axes.append(
                    [PartialRecord.conditions((p,)) for p in _predicates(value, path)]
                )
            elif key in (DYNAMIC_KEY, VALUE_KEY):
                raise MatrixStructureError(
                    f"'{key}' at '{_where(path)}' is only allowed in value context"
                )
            else:
                axes.append(_flatten_keyed(key, value, cfg, _join(path, key)))
        return cartesian_merge(*axes, limit=cfg.max_combinations)

    raise MatrixStructureError(
        f"Unexpected type in object context at '{_where(path)}': "
        f"{type(document).__name__} (expected an object or array of objects)"
    )


def _flatten_multiply(value: Any, cfg: ExpansionConfig, path: str) -> List[PartialRecord]:
    if not _is_sequence(value):
        raise MatrixStructureError(
            f"Unexpected value for '{MULTIPLY_KEY}' at '{_where(path)}': "
            f"{type(value).__name__} (expected an array)"
        )
    groups = [_flatten(item, cfg, f"{path}[{idx}]") for idx, item in enumerate(value)]
    return cartesian_merge(*groups, limit=cfg.max_combinations)


def _predicates(value: Any, path: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if _is_sequence(value) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise MatrixStructureError(
        f"Unexpected value for '{IF_KEY}' at '{_where(path)}': "
        f"{type(value).__name__} (expected a string or array of strings)"
    )


# ---------------------------------------------------------------------------
# Value context
# ---------------------------------------------------------------------------


def _flatten_keyed(
    field: str, document: Any, cfg: ExpansionConfig, path: str
) -> List[PartialRecord]:
    if isinstance(document, (str, bool)):
        return [PartialRecord.single(field, document)]

    if _is_sequence(document):
        records: List[PartialRecord] = []
        for idx, item in enumerate(document):
            records.extend(_flatten_keyed(field, item, cfg, f"{path}[{idx}]"))
        return records

    if isinstance(document, Mapping):
        entries = _entries(document, cfg, path)

        if DYNAMIC_KEY in entries:
            expression = entries.pop(DYNAMIC_KEY)
            if not isinstance(expression, str):
                raise MatrixStructureError(
                    f"Unexpected type in '{DYNAMIC_KEY}' value context for "
                    f"'{field}': {type(expression).__name__} (expected a string)"
                )
            deferred = [PartialRecord.single(field, Deferred(expression))]
            if not entries:
                return deferred
            return cartesian_merge(
                deferred, _flatten(entries, cfg, path), limit=cfg.max_combinations
            )

        if VALUE_KEY in entries:
            literal = entries.pop(VALUE_KEY)
            return cartesian_merge(
                _flatten_keyed(field, literal, cfg, _join(path, VALUE_KEY)),
                _flatten(entries, cfg, path),
                limit=cfg.max_combinations,
            )

        if not entries:
            raise MatrixStructureError(
                f"Object in value context for '{field}' must have at least one key"
            )

        # Each key is one candidate value with its own attached fields
        branches: List[PartialRecord] = []
        for candidate, nested in entries.items():
            if candidate in RESERVED_KEYS:
                raise MatrixStructureError(
                    f"'{candidate}' cannot be used as a value for '{field}'; "
                    f"wrap the value with '{VALUE_KEY}' to attach it"
                )
            branches.extend(
                cartesian_merge(
                    [PartialRecord.single(field, candidate)],
                    _flatten(nested, cfg, _join(path, candidate)),
                    limit=cfg.max_combinations,
                )
            )
        return branches

    raise MatrixStructureError(
        f"Unexpected type in value context for key '{field}': "
        f"{type(document).__name__} (expected a string, boolean, array or object)"
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _entries(mapping: Mapping[Any, Any], cfg: ExpansionConfig, path: str) -> Dict[str, Any]:
    """Return a private copy of `mapping` with string keys."""
    if cfg.normalize_keys:
        return normalize_mapping_keys(mapping)
    for key in mapping:
        if not isinstance(key, str):
            raise MatrixStructureError(
                f"Non-string key {key!r} at '{_where(path)}' (keys must be strings)"
            )
    return dict(mapping)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _where(path: str) -> str:
    return path or "<root>"
