"""JSON Schema validation for matrix documents.

Checks the shape of an already-decoded document against the packaged
schema `buildmatrix/schemas/matrix.json` so that misplaced reserved keys are
reported with their location before any expansion work is done.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import best_match

from buildmatrix.errors import MatrixStructureError

__all__ = [
    "load_matrix_schema",
    "validate_matrix_document",
]

# Decoded documents may use tuples and read-only mappings as well
_TYPE_CHECKER = Draft7Validator.TYPE_CHECKER.redefine_many(
    {
        "array": lambda _checker, instance: isinstance(instance, (list, tuple)),
        "object": lambda _checker, instance: isinstance(instance, Mapping),
    }
)

MatrixValidator = validators.extend(Draft7Validator, type_checker=_TYPE_CHECKER)


@lru_cache(maxsize=1)
def load_matrix_schema() -> Dict[str, Any]:
    """Return the packaged matrix document schema."""
    with (
        resources.files("buildmatrix.schemas")
        .joinpath("matrix.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def validate_matrix_document(document: Any) -> None:
    """Validate `document` against the matrix schema.

    Args:
        document: Decoded matrix document.

    Raises:
        MatrixStructureError: With the location and reason of the most
            relevant violation.
    """
    validator = MatrixValidator(load_matrix_schema())
    error = best_match(validator.iter_errors(document))
    if error is None:
        return

    location = "/".join(str(part) for part in error.absolute_path) or "<root>"
    raise MatrixStructureError(
        f"Matrix document is invalid at '{location}': {error.message}"
    )
