"""Evaluation of `$dynamic` fields and `$if` predicates."""

from buildmatrix.eval.expressions import (
    DEFAULT_FUNCTIONS,
    ExpressionEvaluator,
    SimpleExpressionEvaluator,
)
from buildmatrix.eval.records import (
    ConfigView,
    RecordScope,
    evaluate_record,
    evaluate_records,
)

__all__ = [
    # Expressions
    "ExpressionEvaluator",
    "SimpleExpressionEvaluator",
    "DEFAULT_FUNCTIONS",
    # Records
    "ConfigView",
    "RecordScope",
    "evaluate_record",
    "evaluate_records",
]
