"""Tests for mask-reduce deduplication."""

import pytest

from buildmatrix.reduce import mask_reduce, mask_relation
from buildmatrix.types.base import MaskRelation


class TestMaskRelation:
    """Tests for mask_relation."""

    def test_equal(self) -> None:
        """Same fields and values are EQUAL."""
        assert mask_relation({"a": "1", "b": "2"}, {"b": "2", "a": "1"}) is MaskRelation.EQUAL

    def test_superset(self) -> None:
        """More fields agreeing on the existing ones is SUPERSET."""
        assert mask_relation({"a": "1", "b": "2"}, {"a": "1"}) is MaskRelation.SUPERSET

    def test_subset_is_no(self) -> None:
        """Fewer fields never mask."""
        assert mask_relation({"a": "1"}, {"a": "1", "b": "2"}) is MaskRelation.NO

    def test_value_mismatch_is_no(self) -> None:
        """Differing values never mask."""
        assert mask_relation({"a": "1", "b": "2"}, {"a": "2"}) is MaskRelation.NO

    def test_disjoint_fields_is_no(self) -> None:
        """Same size, different fields is NO."""
        assert mask_relation({"a": "1"}, {"b": "1"}) is MaskRelation.NO

    @pytest.mark.parametrize(
        "left, right",
        [(True, "true"), (False, "false"), (1, "1"), (1.0, "1"), (2.5, "2.5")],
    )
    def test_textual_comparison(self, left, right) -> None:
        """Values with the same textual form are treated as equal."""
        assert mask_relation({"a": left}, {"a": right}) is MaskRelation.EQUAL

    def test_empty_record_is_masked_by_anything(self) -> None:
        """An empty accepted record is a subset of every record."""
        assert mask_relation({"a": "1"}, {}) is MaskRelation.SUPERSET
        assert mask_relation({}, {}) is MaskRelation.EQUAL


class TestMaskReduce:
    """Tests for mask_reduce."""

    def test_superset_masks_subset(self) -> None:
        """{a:1} followed by {a:1,b:2} reduces to the superset."""
        assert mask_reduce([{"a": 1}, {"a": 1, "b": 2}]) == [{"a": 1, "b": 2}]

    def test_duplicates_removed(self) -> None:
        """Exact duplicates collapse to the first occurrence."""
        assert mask_reduce([{"a": 1}, {"a": 1}]) == [{"a": 1}]

    def test_distinct_values_kept(self) -> None:
        """Alternatives of the same field are all kept."""
        records = [{"os": "mac"}, {"os": "linux"}, {"os": "windows"}]
        assert mask_reduce(records) == records

    def test_subset_after_superset_is_kept(self) -> None:
        """Only earlier, less specific records are removed."""
        assert mask_reduce([{"a": 1, "b": 2}, {"a": 1}]) == [{"a": 1, "b": 2}, {"a": 1}]

    def test_superset_removes_several(self) -> None:
        """One specific record can mask several general ones."""
        records = [{"a": 1}, {"b": 2}, {"c": 3}, {"a": 1, "b": 2}]
        assert mask_reduce(records) == [{"c": 3}, {"a": 1, "b": 2}]

    def test_order_preserved(self) -> None:
        """Survivors keep their relative order."""
        records = [{"x": 1}, {"a": 1}, {"y": 1}, {"a": 1, "b": 2}, {"z": 1}]
        assert mask_reduce(records) == [{"x": 1}, {"y": 1}, {"a": 1, "b": 2}, {"z": 1}]

    def test_cross_type_duplicates_merge(self) -> None:
        """Boolean True and string 'true' are duplicates for masking."""
        assert mask_reduce([{"debug": True}, {"debug": "true"}]) == [{"debug": True}]

    def test_whole_float_masked_by_string_superset(self) -> None:
        """A float 1.0 is the same value as "1" for masking."""
        assert mask_reduce([{"a": 1.0}, {"a": "1", "b": "z"}]) == [{"a": "1", "b": "z"}]

    def test_fractional_float_is_distinct(self) -> None:
        """1.5 and "1" are different values."""
        assert mask_reduce([{"a": 1.5}, {"a": "1", "b": "z"}]) == [
            {"a": 1.5},
            {"a": "1", "b": "z"},
        ]

    def test_empty_input(self) -> None:
        """No records in, no records out."""
        assert mask_reduce([]) == []

    def test_accepts_iterator(self) -> None:
        """Any iterable of records is accepted."""
        assert mask_reduce(iter([{"a": 1}, {"a": 1}])) == [{"a": 1}]
