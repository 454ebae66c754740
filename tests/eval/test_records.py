"""Tests for deferred-field resolution and predicate evaluation."""

from types import SimpleNamespace

import pytest

from buildmatrix.errors import CircularDependencyError, InvalidPredicateError
from buildmatrix.eval.expressions import SimpleExpressionEvaluator
from buildmatrix.eval.records import (
    ConfigView,
    RecordScope,
    evaluate_record,
    evaluate_records,
)
from buildmatrix.model.record import PartialRecord
from buildmatrix.types.base import Deferred


class CountingEvaluator(SimpleExpressionEvaluator):
    """Evaluator that records every expression it evaluates."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = []

    def evaluate(self, expression, bindings):
        self.calls.append(expression)
        return super().evaluate(expression, bindings)


@pytest.fixture
def evaluator():
    return CountingEvaluator()


class TestConfigView:
    """Tests for ConfigView."""

    def test_mapping_attribute_access(self) -> None:
        """Keys of a mapping read as attributes, nested mappings too."""
        view = ConfigView({"target": "release", "flags": {"debug": True}})
        assert view.target == "release"
        assert view.flags.debug is True

    def test_missing_keys_are_none(self) -> None:
        """Missing keys read as None instead of failing."""
        view = ConfigView({"a": {}})
        assert view.missing is None
        assert view.a.missing is None

    def test_object_attributes(self) -> None:
        """Non-mapping configs are read by attribute."""
        view = ConfigView(SimpleNamespace(arm=True))
        assert view.arm is True
        assert view.other is None

    def test_truthiness_and_equality(self) -> None:
        """Views compare and test like the wrapped value."""
        assert not ConfigView({})
        assert ConfigView({"x": 1}) == {"x": 1}
        assert "x" in ConfigView({"x": 1})


class TestRecordScope:
    """Tests for RecordScope resolution."""

    def test_literal_fields(self, evaluator) -> None:
        """Literal fields are returned as they are."""
        scope = RecordScope(PartialRecord(fields={"os": "mac"}), {}, evaluator)
        assert scope.resolve("os") == "mac"
        assert scope["os"] == "mac"

    def test_deferred_reads_siblings_and_config(self, evaluator) -> None:
        """Deferred fields see other fields and the config."""
        record = PartialRecord(
            fields={"os": "mac", "name": Deferred("os + '-' + config.suffix")}
        )
        scope = RecordScope(record, {"suffix": "ci"}, evaluator)
        assert scope.resolve("name") == "mac-ci"

    def test_this_binding(self, evaluator) -> None:
        """`this.field` reads a field; missing fields are None."""
        record = PartialRecord(
            fields={"os": "mac", "flag": Deferred("this.os == 'mac' and this.nope is None")}
        )
        assert RecordScope(record, None, evaluator).resolve("flag") is True

    def test_transitive_deferred(self, evaluator) -> None:
        """Deferred fields may depend on other deferred fields."""
        record = PartialRecord(
            fields={
                "a": Deferred("b + '!'"),
                "b": Deferred("c + 'b'"),
                "c": "c",
            }
        )
        assert RecordScope(record, {}, evaluator).resolve("a") == "cb!"

    def test_memoized(self, evaluator) -> None:
        """A deferred field is evaluated at most once."""
        record = PartialRecord(fields={"a": Deferred("'x'"), "b": Deferred("a + a")})
        scope = RecordScope(record, {}, evaluator)
        assert scope.resolve("b") == "xx"
        assert scope.resolve("a") == "x"
        assert evaluator.calls.count("'x'") == 1

    def test_empty_string_is_absent(self, evaluator) -> None:
        """An empty result normalizes to None."""
        scope = RecordScope(PartialRecord(fields={"a": Deferred("''")}), {}, evaluator)
        assert scope.resolve("a") is None

    def test_self_reference_is_circular(self, evaluator) -> None:
        """A field reading itself raises CircularDependencyError."""
        scope = RecordScope(PartialRecord(fields={"a": Deferred("a + '1'")}), {}, evaluator)
        with pytest.raises(CircularDependencyError, match="property 'a'") as exc_info:
            scope.resolve("a")
        assert exc_info.value.field == "a"
        assert exc_info.value.expression == "a + '1'"

    def test_indirect_cycle(self, evaluator) -> None:
        """Cycles through other fields are detected."""
        record = PartialRecord(fields={"a": Deferred("b"), "b": Deferred("this.a")})
        with pytest.raises(CircularDependencyError):
            RecordScope(record, {}, evaluator).resolve("a")

    def test_unknown_bare_name(self, evaluator) -> None:
        """Unknown bare names are evaluation errors."""
        scope = RecordScope(PartialRecord(fields={"a": Deferred("nope")}), {}, evaluator)
        with pytest.raises(InvalidPredicateError):
            scope.resolve("a")

    def test_check_short_circuits(self, evaluator) -> None:
        """Predicates stop at the first falsy one."""
        scope = RecordScope(PartialRecord(), {"x": False}, evaluator)
        assert scope.check(["True", "config.x", "undefined_name"]) is False
        assert evaluator.calls == ["True", "config.x"]

    def test_materialize_drops_absent(self, evaluator) -> None:
        """Materialized output has no deferred values and no absent fields."""
        record = PartialRecord(
            fields={"os": "mac", "extra": Deferred("''"), "n": Deferred("len(os)")}
        )
        assert RecordScope(record, {}, evaluator).materialize() == {"os": "mac", "n": 3}

    def test_materialize_unwraps_config_values(self, evaluator) -> None:
        """Config mappings returned by expressions become plain dicts."""
        record = PartialRecord(fields={"env": Deferred("config.env")})
        scope = RecordScope(record, {"env": {"CC": "clang"}}, evaluator)
        assert scope.materialize() == {"env": {"CC": "clang"}}


class TestEvaluateRecord:
    """Tests for evaluate_record and evaluate_records."""

    def test_no_predicates(self, evaluator) -> None:
        """Records without predicates are kept."""
        assert evaluate_record(PartialRecord(fields={"os": "mac"}), {}, evaluator) == {
            "os": "mac"
        }

    def test_predicate_false_excludes(self, evaluator) -> None:
        """A false predicate excludes the record."""
        record = PartialRecord(fields={"os": "mac"}, predicates=("config.mac",))
        assert evaluate_record(record, {"mac": False}, evaluator) is None
        assert evaluate_record(record, {"mac": True}, evaluator) == {"os": "mac"}

    def test_predicate_reads_deferred_field(self, evaluator) -> None:
        """Predicates may read deferred fields."""
        record = PartialRecord(
            fields={"os": "mac", "name": Deferred("os + '-x'")},
            predicates=("name == 'mac-x'",),
        )
        assert evaluate_record(record, {}, evaluator) == {"os": "mac", "name": "mac-x"}

    def test_empty_predicate_is_error(self, evaluator) -> None:
        """An empty predicate is invalid even when other predicates pass."""
        record = PartialRecord(predicates=("True", " "))
        with pytest.raises(InvalidPredicateError, match="empty string"):
            evaluate_record(record, {}, evaluator)

    def test_evaluate_records_keeps_order(self, evaluator) -> None:
        """Kept records stay in input order."""
        records = [
            PartialRecord(fields={"os": "mac"}, predicates=("os != 'linux'",)),
            PartialRecord(fields={"os": "linux"}, predicates=("os != 'linux'",)),
            PartialRecord(fields={"os": "bsd"}),
        ]
        assert evaluate_records(records, {}, evaluator) == [{"os": "mac"}, {"os": "bsd"}]
