"""Partial records produced while flattening a matrix document."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from buildmatrix.types.base import Deferred, FieldValue


@dataclass(frozen=True)
class PartialRecord:
    """An immutable fragment of one output record.

    Attributes:
        fields: Mapping of field name to literal or deferred value.
        predicates: Pending `$if` expressions, all of which must hold for the
            record to be kept. Order is the order in which they were merged.
    """

    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    predicates: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Freeze a private copy so callers cannot alias the field mapping
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def single(cls, name: str, value: FieldValue) -> "PartialRecord":
        """Build a record with exactly one field."""
        return cls(fields={name: value})

    @classmethod
    def conditions(cls, predicates: Iterable[str]) -> "PartialRecord":
        """Build a record that carries only predicates."""
        return cls(predicates=tuple(predicates))

    def merged_with(self, other: "PartialRecord") -> "PartialRecord":
        """Return `other` laid over this record.

        Fields of `other` win on name clashes; predicates of both are kept.
        """
        fields: Dict[str, FieldValue] = dict(self.fields)
        fields.update(other.fields)
        return PartialRecord(fields=fields, predicates=self.predicates + other.predicates)

    def deferred_fields(self) -> Dict[str, Deferred]:
        """Return the fields that still need evaluation."""
        return {k: v for k, v in self.fields.items() if isinstance(v, Deferred)}

    def to_dict(self) -> Dict[str, FieldValue]:
        """Return a plain, mutable copy of the fields."""
        return dict(self.fields)
