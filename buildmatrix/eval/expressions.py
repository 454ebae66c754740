"""Expression evaluation for `$if` predicates and `$dynamic` fields.

The pipeline only needs `evaluate(expression, bindings) -> value`. The
default implementation delegates to simpleeval, which evaluates Python
expression syntax, list and tuple literals included, over a restricted AST:
no assignments, imports, dunder access or arbitrary calls.

Example:
    >>> SimpleExpressionEvaluator().evaluate("os == 'mac' and not arm", {"os": "mac", "arm": False})
    True
"""

from __future__ import annotations

import ast
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

from simpleeval import EvalWithCompoundTypes, InvalidExpression

from buildmatrix.errors import InvalidPredicateError

__all__ = [
    "ExpressionEvaluator",
    "SimpleExpressionEvaluator",
    "DEFAULT_FUNCTIONS",
]

#: Functions callable from expressions. Random helpers are left out so
#: expansion stays deterministic.
DEFAULT_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "len": len,
}


class ExpressionEvaluator(ABC):
    """Evaluates an expression string against a set of name bindings."""

    @abstractmethod
    def evaluate(self, expression: str, bindings: Mapping[str, Any]) -> Any:
        """Evaluate `expression` with `bindings` in scope.

        Raises:
            InvalidPredicateError: If the expression is empty or malformed, or
                fails at run time (e.g. an operation on a missing value).
        """


class SimpleExpressionEvaluator(ExpressionEvaluator):
    """simpleeval-backed evaluator with a per-instance parse cache.

    Args:
        functions: Extra functions made available to expressions, merged over
            DEFAULT_FUNCTIONS.
    """

    def __init__(self, functions: Optional[Mapping[str, Callable[..., Any]]] = None) -> None:
        self._functions: Dict[str, Callable[..., Any]] = dict(DEFAULT_FUNCTIONS)
        if functions:
            self._functions.update(functions)
        self._parser = EvalWithCompoundTypes(functions=self._functions)
        self._parsed: Dict[str, ast.AST] = {}

    def compile(self, expression: str) -> ast.AST:
        """Parse `expression` once and return its syntax tree.

        Raises:
            InvalidPredicateError: If the text is empty or does not parse.
        """
        trimmed = expression.strip()
        if not trimmed:
            raise InvalidPredicateError("Invalid predicate: empty string")

        node = self._parsed.get(trimmed)
        if node is None:
            try:
                node = self._parser.parse(trimmed)
            except (SyntaxError, ValueError, InvalidExpression) as exc:
                raise InvalidPredicateError(f"Invalid predicate: {trimmed}: {exc}") from exc
            self._parsed[trimmed] = node
        return node

    def evaluate(self, expression: str, bindings: Mapping[str, Any]) -> Any:
        node = self.compile(expression)
        trimmed = expression.strip()
        # One engine per call: deferred fields evaluate re-entrantly
        engine = EvalWithCompoundTypes(functions=self._functions, names=bindings)
        try:
            return engine.eval(trimmed, previously_parsed=node)
        except (InvalidExpression, TypeError, ZeroDivisionError) as exc:
            raise InvalidPredicateError(f"Invalid predicate: {trimmed}: {exc}") from exc
