"""buildmatrix: expand nested matrix documents into flat configuration records.

A matrix document describes the axes of variation of, e.g., a build pipeline:
arrays are alternatives, sibling keys are combined by Cartesian product,
`$multiply` combines whole sub-documents, `$if` filters combinations against
an external config, `$dynamic` computes values and `$value` wraps a literal
with attached fields.

Primary API:
    generate_matrix() - Expand a document into deduplicated records
    ExpansionConfig - Limits and validation switches

Example:
    from buildmatrix import generate_matrix

    records = generate_matrix(
        {
            "os": ["mac", "linux"],
            "arch": {"x64": {}, "arm64": {"$if": "config.arm"}},
        },
        {"arm": False},
    )
    # [{"os": "mac", "arch": "x64"}, {"os": "linux", "arch": "x64"}]
"""

from __future__ import annotations

from buildmatrix import logging
from buildmatrix._version import __version__
from buildmatrix.config import DEFAULT_CONFIG, ExpansionConfig
from buildmatrix.dsl.expansion import cartesian, cartesian_merge, flatten, flatten_keyed, merge
from buildmatrix.dsl.schema import validate_matrix_document
from buildmatrix.errors import (
    CircularDependencyError,
    ExpansionLimitError,
    InvalidPredicateError,
    MatrixError,
    MatrixStructureError,
)
from buildmatrix.eval import (
    ExpressionEvaluator,
    SimpleExpressionEvaluator,
    evaluate_record,
    evaluate_records,
)
from buildmatrix.matrix import generate_matrix
from buildmatrix.model.record import PartialRecord
from buildmatrix.reduce import mask_reduce, mask_relation
from buildmatrix.types.base import Deferred, MaskRelation

__all__ = [
    # Version
    "__version__",
    # Entry point
    "generate_matrix",
    # Configuration
    "ExpansionConfig",
    "DEFAULT_CONFIG",
    # Pipeline stages
    "flatten",
    "flatten_keyed",
    "cartesian",
    "merge",
    "cartesian_merge",
    "validate_matrix_document",
    "evaluate_record",
    "evaluate_records",
    "mask_reduce",
    "mask_relation",
    # Types
    "PartialRecord",
    "Deferred",
    "MaskRelation",
    "ExpressionEvaluator",
    "SimpleExpressionEvaluator",
    # Errors
    "MatrixError",
    "MatrixStructureError",
    "InvalidPredicateError",
    "CircularDependencyError",
    "ExpansionLimitError",
    # Utilities
    "logging",
]
