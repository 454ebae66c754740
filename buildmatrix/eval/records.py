"""Evaluation of deferred fields and `$if` predicates for one record.

Each record gets its own RecordScope: a memo table of resolved deferred
fields plus the set of fields currently being resolved. Expressions see
three kinds of names:

- `config`: the external configuration, readable as attributes
  (`config.target`), with missing keys reading as None;
- `this`: the record itself (`this.os`), with missing fields reading as None;
- every field of the record as a bare name (`os == 'mac'`).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

from buildmatrix.errors import CircularDependencyError
from buildmatrix.eval.expressions import ExpressionEvaluator
from buildmatrix.logging import get_logger
from buildmatrix.model.record import PartialRecord
from buildmatrix.types.base import Deferred

__all__ = [
    "ConfigView",
    "RecordScope",
    "evaluate_record",
    "evaluate_records",
]

logger = get_logger(__name__)


class ConfigView:
    """Read-only attribute access over the external config.

    Mappings are read by key, other objects by attribute. Nested mappings are
    wrapped again so `config.flags.debug` works on plain dicts.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Any) -> None:
        self._data = data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, key: str) -> Any:
        if isinstance(self._data, Mapping):
            value = self._data.get(key)
        else:
            value = getattr(self._data, key, None)
        return ConfigView(value) if isinstance(value, Mapping) else value

    def __contains__(self, key: str) -> bool:
        if isinstance(self._data, Mapping):
            return key in self._data
        return hasattr(self._data, key)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigView):
            return self._data == other._data
        return self._data == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigView({self._data!r})"

    def unwrap(self) -> Any:
        """Return the wrapped object."""
        return self._data


class _RecordView:
    """`this` inside expressions: field access with None for missing fields."""

    __slots__ = ("_scope",)

    def __init__(self, scope: "RecordScope") -> None:
        self._scope = scope

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._scope.get(name)

    def __getitem__(self, name: str) -> Any:
        return self._scope.get(name)

    def __contains__(self, name: str) -> bool:
        return self._scope.has_field(name)


class RecordScope:
    """Name bindings for evaluating expressions against one record.

    Deferred fields are resolved lazily on first read and memoized. Reading a
    field while its own expression is still being evaluated raises
    CircularDependencyError.

    Args:
        record: Partial record to evaluate.
        config: External configuration object (mapping or any object).
        evaluator: Expression evaluator used for predicates and fields.
    """

    def __init__(
        self, record: PartialRecord, config: Any, evaluator: ExpressionEvaluator
    ) -> None:
        self._record = record
        self._config = ConfigView(config if config is not None else {})
        self._evaluator = evaluator
        self._resolved: Dict[str, Any] = {}
        self._resolving: Set[str] = set()
        self._this = _RecordView(self)

    # Mapping protocol used by the expression engine for bare names

    def __getitem__(self, name: str) -> Any:
        if name == "config":
            return self._config
        if name == "this":
            return self._this
        if name in self._record.fields:
            return self.resolve(name)
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return name in ("config", "this") or name in self._record.fields

    def __iter__(self) -> Iterator[str]:
        yield "config"
        yield "this"
        yield from self._record.fields

    def __len__(self) -> int:
        return len(self._record.fields) + 2

    def has_field(self, name: str) -> bool:
        return name in self._record.fields

    def get(self, name: str) -> Any:
        """Return the field's value, or None if the record has no such field."""
        if name not in self._record.fields:
            return None
        return self.resolve(name)

    def resolve(self, name: str) -> Any:
        """Return the concrete value of field `name`, evaluating it if deferred.

        An expression result of "" is normalized to None (absent).

        Raises:
            KeyError: If the record has no such field.
            CircularDependencyError: If the field's expression reads the
                field itself, directly or through other deferred fields.
        """
        if name in self._resolved:
            return self._resolved[name]

        value = self._record.fields[name]
        if not isinstance(value, Deferred):
            return value

        if name in self._resolving:
            raise CircularDependencyError(name, value.expression)

        self._resolving.add(name)
        try:
            result = self._evaluator.evaluate(value.expression, self)
        finally:
            self._resolving.discard(name)

        if isinstance(result, str) and result == "":
            result = None
        self._resolved[name] = result
        return result

    def check(self, predicates: Iterable[str]) -> bool:
        """Return True if every predicate is truthy; stop at the first falsy one."""
        for predicate in predicates:
            if not self._evaluator.evaluate(predicate, self):
                logger.debug("Predicate %r is false for %r", predicate, dict(self._record.fields))
                return False
        return True

    def materialize(self) -> Dict[str, Any]:
        """Resolve every field and return a plain dict without absent fields."""
        output: Dict[str, Any] = {}
        for name in self._record.fields:
            value = _to_plain(self.resolve(name))
            if value is not None:
                output[name] = value
        return output


def evaluate_record(
    record: PartialRecord, config: Any, evaluator: ExpressionEvaluator
) -> Optional[Dict[str, Any]]:
    """Apply a record's predicates and materialize its fields.

    Args:
        record: Flattened partial record.
        config: External configuration visible as `config` in expressions.
        evaluator: Expression evaluator.

    Returns:
        The materialized record, or None if a predicate excluded it.
    """
    scope = RecordScope(record, config, evaluator)
    if not scope.check(record.predicates):
        return None
    return scope.materialize()


def evaluate_records(
    records: Iterable[PartialRecord], config: Any, evaluator: ExpressionEvaluator
) -> List[Dict[str, Any]]:
    """Evaluate records in order and keep the ones whose predicates hold."""
    kept: List[Dict[str, Any]] = []
    for record in records:
        evaluated = evaluate_record(record, config, evaluator)
        if evaluated is not None:
            kept.append(evaluated)
    return kept


def _to_plain(value: Any) -> Any:
    """Convert an expression result to a JSON-equivalent value."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, ConfigView):
        return _to_plain(value.unwrap())
    if isinstance(value, Mapping):
        return {str(k): _to_plain(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return str(value)
