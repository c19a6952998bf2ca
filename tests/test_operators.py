"""
Tests for the set operators and their algebraic properties.
"""

import warnings

import pytest

from setdiff.config import Configuration
from setdiff.diagnostics import Diagnostics, EmptyOperandWarning
from setdiff.expressions import Operator
from setdiff.lineset import LineSet
from setdiff.operators import (
    UnknownOperatorError,
    apply_operator,
    difference,
    intersect,
    line_terminator,
    merge_line,
    union,
)


def lines(*words):
    return LineSet({w: w + "\n" for w in words})


A = lines("x", "y")
B = lines("y", "z")


class TestUnion:
    """OR."""

    def test_contains_every_key(self):
        assert set(union(A, B)) == {"x", "y", "z"}

    def test_right_operand_wins_on_collision(self):
        lhs = LineSet({"k": "left\n"})
        rhs = LineSet({"k": "right\n"})
        assert union(lhs, rhs)["k"] == "right\n"

    def test_idempotent(self):
        assert union(A, A) == A

    def test_commutative_key_set(self):
        assert set(union(A, B)) == set(union(B, A))

    def test_keeps_left_order_then_new_right_keys(self):
        assert list(union(A, B)) == ["x", "y", "z"]

    def test_does_not_mutate_inputs(self):
        union(A, B)
        assert A == lines("x", "y")
        assert B == lines("y", "z")


class TestIntersect:
    """AND, with and without merging."""

    def test_common_keys_only(self):
        assert set(intersect(A, B)) == {"y"}

    def test_left_value_kept(self):
        lhs = LineSet({"k": "left\n"})
        rhs = LineSet({"k": "right\n"})
        assert intersect(lhs, rhs)["k"] == "left\n"

    def test_idempotent(self):
        assert intersect(A, A) == A

    def test_size_bound(self):
        assert len(intersect(A, B)) <= min(len(A), len(B))

    def test_merge_columns(self):
        lhs = LineSet({"11111|CD": "11111|CD|5\n", "12345|DVD": "12345|DVD|3\n"})
        rhs = LineSet({"11111|CD": "11111|CD|24\n"})
        result = intersect(lhs, rhs, merge_columns=(2,))
        assert dict(result) == {"11111|CD": "11111|CD|5|24|\n"}


class TestMergeLine:
    """Appending right-hand columns to a left-hand line."""

    def test_basic(self):
        assert merge_line("11111|CD|5\n", "11111|CD|24\n", (2,)) == "11111|CD|5|24|\n"

    def test_several_columns_in_order(self):
        assert merge_line("a|b\n", "a|x|y\n", (2, 1)) == "a|b|y|x|\n"

    def test_left_line_already_ending_in_delimiter(self):
        assert merge_line("a|b|\n", "a|x\n", (1,)) == "a|b|x|\n"

    def test_missing_columns_leave_line_unchanged(self):
        assert merge_line("a|b\n", "a|x\n", (9,)) == "a|b\n"

    def test_existing_empty_field_is_appended(self):
        assert merge_line("a|b\n", "a||c\n", (1,)) == "a|b||\n"

    def test_left_line_without_terminator(self):
        assert merge_line("a|b", "a|x", (1,)) == "a|b|x|\n"

    def test_keeps_windows_terminator(self):
        assert merge_line("a|b\r\n", "a|x\n", (1,)) == "a|b|x|\r\n"

    def test_uses_raw_right_line_not_its_key(self):
        assert merge_line("a|b\n", "A| mixed Case \n", (1,)) == "a|b| mixed Case|\n"


class TestLineTerminator:
    @pytest.mark.parametrize("raw,expected", [
        ("a\n", "\n"),
        ("a\r\n", "\r\n"),
        ("a\r", "\r"),
        ("a", ""),
    ])
    def test_terminators(self, raw, expected):
        assert line_terminator(raw) == expected


class TestDifference:
    """NOT."""

    def test_left_keys_absent_from_right(self):
        assert set(difference(A, B)) == {"x"}

    def test_self_difference_is_empty(self):
        assert len(difference(A, A)) == 0

    def test_shares_no_keys_with_right(self):
        assert not set(difference(A, B)) & set(B)


class TestApplyOperator:
    """Dispatch and diagnostics."""

    def test_dispatch(self):
        config = Configuration()
        assert set(apply_operator(Operator.OR, A, B, config)) == {"x", "y", "z"}
        assert set(apply_operator(Operator.AND, A, B, config)) == {"y"}
        assert set(apply_operator(Operator.NOT, A, B, config)) == {"x"}

    def test_merge_only_under_and(self):
        config = Configuration(merge_columns=(1,))
        lhs = LineSet({"a": "a|1\n"})
        rhs = LineSet({"a": "a|2\n"})
        assert apply_operator(Operator.AND, lhs, rhs, config)["a"] == "a|1|2|\n"
        with pytest.warns(EmptyOperandWarning):
            assert apply_operator(Operator.NOT, lhs, LineSet(), config, Diagnostics()) == lhs
            assert apply_operator(Operator.OR, lhs, LineSet(), config, Diagnostics())["a"] == "a|1\n"

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperatorError):
            apply_operator("XOR", A, B, Configuration())

    def test_empty_operand_warns_once_per_run(self):
        diagnostics = Diagnostics()
        empty = LineSet()
        with pytest.warns(EmptyOperandWarning) as record:
            assert len(apply_operator(Operator.AND, A, empty, Configuration(), diagnostics)) == 0
            assert apply_operator(Operator.OR, empty, B, Configuration(), diagnostics) == B
            assert apply_operator(Operator.NOT, A, empty, Configuration(), diagnostics) == A
        assert len([w for w in record if issubclass(w.category, EmptyOperandWarning)]) == 1

    def test_no_warning_for_non_empty_operands(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            apply_operator(Operator.OR, A, B, Configuration(), Diagnostics())
