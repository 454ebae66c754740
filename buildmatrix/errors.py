"""Exceptions raised while expanding a matrix document.

Every error aborts the whole expansion; nothing is recovered internally.
"""

from __future__ import annotations


class MatrixError(Exception):
    """Base class for all buildmatrix errors."""


class MatrixStructureError(MatrixError, ValueError):
    """The document has a shape that cannot be expanded at this position."""


class InvalidPredicateError(MatrixError, ValueError):
    """An `$if` or `$dynamic` expression is empty or cannot be evaluated."""


class CircularDependencyError(MatrixError, RuntimeError):
    """A deferred field depends, directly or transitively, on itself."""

    def __init__(self, field: str, expression: str) -> None:
        super().__init__(
            f"Circular dependency computing property '{field}' "
            f"for expression '{expression}'"
        )
        self.field = field
        self.expression = expression


class ExpansionLimitError(MatrixError, ValueError):
    """A Cartesian product would exceed the configured combination limit."""
