"""Matrix generation entry point.

generate_matrix() runs the whole pipeline:

1) check the top-level shape (and, optionally, the packaged JSON schema);
2) flatten the document into partial records;
3) evaluate `$if` predicates and `$dynamic` fields against the config;
4) mask-reduce the surviving records.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from buildmatrix.config import DEFAULT_CONFIG, ExpansionConfig
from buildmatrix.dsl.expansion import flatten
from buildmatrix.dsl.schema import validate_matrix_document
from buildmatrix.errors import MatrixStructureError
from buildmatrix.eval.expressions import ExpressionEvaluator, SimpleExpressionEvaluator
from buildmatrix.eval.records import evaluate_records
from buildmatrix.logging import get_logger
from buildmatrix.reduce import mask_reduce

__all__ = ["generate_matrix"]

logger = get_logger(__name__)


def generate_matrix(
    document: Any,
    config: Any = None,
    *,
    options: Optional[ExpansionConfig] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> List[Dict[str, Any]]:
    """Expand a matrix document into flat configuration records.

    Args:
        document: Decoded matrix document; must be a mapping or a sequence.
        config: External configuration visible to expressions as `config`.
        options: Expansion settings; defaults to DEFAULT_CONFIG.
        evaluator: Expression evaluator; a fresh SimpleExpressionEvaluator is
            used when omitted.

    Returns:
        Records as plain dicts of JSON-equivalent values, deduplicated and
        mask-reduced, in expansion order.

    Raises:
        MatrixStructureError: If the document has an invalid shape.
        InvalidPredicateError: If an expression is empty or malformed.
        CircularDependencyError: If a `$dynamic` field depends on itself.
        ExpansionLimitError: If a product exceeds `options.max_combinations`.

    Example:
        >>> generate_matrix({"os": ["mac", "linux"], "label": "build"})
        [{'os': 'mac', 'label': 'build'}, {'os': 'linux', 'label': 'build'}]
    """
    if not isinstance(document, (Mapping, list, tuple)):
        raise MatrixStructureError("Top-level input must be an array or object")

    cfg = options or DEFAULT_CONFIG
    if cfg.validate_schema:
        validate_matrix_document(document)

    flattened = flatten(document, cfg)
    evaluated = evaluate_records(flattened, config, evaluator or SimpleExpressionEvaluator())
    logger.debug(
        "Predicates kept %d of %d record(s)", len(evaluated), len(flattened)
    )
    return mask_reduce(evaluated)
