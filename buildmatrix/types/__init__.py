"""Shared typing constructs for buildmatrix.

This package defines the reserved document keys, the tagged field value used
for deferred fields, and the enums shared by the expansion stages. It contains
no pipeline logic.
"""

from buildmatrix.types.base import (
    DYNAMIC_KEY,
    IF_KEY,
    MULTIPLY_KEY,
    RESERVED_KEYS,
    VALUE_KEY,
    Deferred,
    FieldValue,
    MaskRelation,
    Scalar,
)

__all__ = [
    # Reserved keys
    "IF_KEY",
    "MULTIPLY_KEY",
    "DYNAMIC_KEY",
    "VALUE_KEY",
    "RESERVED_KEYS",
    # Values
    "Deferred",
    "FieldValue",
    "Scalar",
    # Enums
    "MaskRelation",
]
