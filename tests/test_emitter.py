"""
Tests for result emission and structured output.
"""

import io
import json

import yaml

from setdiff.emitter import emit, ordered_values, result_to_dict, result_to_json, result_to_yaml
from setdiff.lineset import LineSet


RESULT = LineSet({"b": "b\n", "a": "a\n", "": "\n", "c": "c"})


class TestOrdering:
    """Emission order is explicit."""

    def test_sorted_by_key(self):
        assert ordered_values(RESULT) == ["a\n", "b\n", "c"]

    def test_insertion_order(self):
        assert ordered_values(RESULT, sort_output=False) == ["b\n", "a\n", "c"]

    def test_sort_is_by_key_not_value(self):
        result = LineSet({"1": "z|1\n", "2": "a|2\n"})
        assert ordered_values(result) == ["z|1\n", "a|2\n"]


class TestEmit:
    """Plain text output."""

    def test_writes_values_and_counts(self):
        out = io.StringIO()
        assert emit(RESULT, out) == 3
        assert out.getvalue() == "a\nb\nc\n"

    def test_preserves_stored_terminators(self):
        out = io.StringIO()
        emit(LineSet({"a": "a\r\n"}), out)
        assert out.getvalue() == "a\r\n"

    def test_empty_result(self):
        out = io.StringIO()
        assert emit(LineSet(), out) == 0
        assert out.getvalue() == ""


class TestStructured:
    """JSON and YAML renderings."""

    def test_dict(self):
        d = result_to_dict(RESULT, expression="x or y")
        assert d == {"expression": "x or y", "count": 3, "lines": ["a", "b", "c"]}

    def test_json(self):
        assert json.loads(result_to_json(RESULT, "x or y"))["lines"] == ["a", "b", "c"]

    def test_yaml(self):
        data = yaml.safe_load(result_to_yaml(RESULT, "x or y", sort_output=False))
        assert data["lines"] == ["b", "a", "c"]
        assert data["count"] == 3


class TestEmptyKeys:
    """Only blank lines are suppressed, not lines whose key is empty."""

    def test_non_blank_line_with_empty_key_is_printed(self):
        out = io.StringIO()
        assert emit(LineSet({"": "x|y\n"}), out) == 1
        assert out.getvalue() == "x|y\n"

    def test_blank_value_is_skipped(self):
        assert ordered_values(LineSet({"": "  \n", "a": "a\n"})) == ["a\n"]

    def test_structured_output_keeps_empty_key_line(self):
        assert result_to_dict(LineSet({"": "|x|y\n"}))["lines"] == ["|x|y"]
