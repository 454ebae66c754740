"""Reserved document keys and tagged field values for matrix expansion."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

#: Conditional predicate key (string or list of strings).
IF_KEY = "$if"

#: Explicit Cartesian-product operator (list of documents, object context only).
MULTIPLY_KEY = "$multiply"

#: Deferred value marker (string expression, value context only).
DYNAMIC_KEY = "$dynamic"

#: Literal wrapped value marker (value context only).
VALUE_KEY = "$value"

#: Keys that may not be used as candidate values of a field.
RESERVED_KEYS = frozenset({IF_KEY, MULTIPLY_KEY, DYNAMIC_KEY, VALUE_KEY})

#: Literal leaf value allowed in a matrix document.
Scalar = Union[str, bool]


@dataclass(frozen=True)
class Deferred:
    """A field whose value is computed from an expression at evaluation time.

    Attributes:
        expression: Expression text, evaluated against the external config and
            the record the field belongs to.
    """

    expression: str


#: Value of a field in a partial record before evaluation.
FieldValue = Union[Scalar, Deferred]


class MaskRelation(Enum):
    """How an incoming record relates to one that was already accepted."""

    #: No masking relationship.
    NO = "no"
    #: Same fields with the same values; the incoming record is a duplicate.
    EQUAL = "equal"
    #: Strictly more fields, agreeing on every field of the accepted record.
    SUPERSET = "superset"
