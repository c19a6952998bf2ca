"""
Output of evaluation results.

Emission order is an explicit step: sorted by key by default, or the
LineSet's insertion order when asked. Blank lines are members of
the set but are never printed; a non-blank line is printed even when
its key is empty.

Also provides JSON/YAML renderings of a result for scripting.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, TextIO

import yaml

from setdiff.lineset import LineSet
from setdiff.operators import line_terminator


def ordered_values(result: LineSet, sort_output: bool = True) -> List[str]:
    """Return the printable values of ``result`` in emission order."""
    keys = sorted(result) if sort_output else list(result)
    return [result[key] for key in keys if result[key].strip()]


def emit(result: LineSet, stream: TextIO, sort_output: bool = True) -> int:
    """
    Write the values of ``result`` to ``stream``.

    Values are written as stored; one lacking a line terminator gets a
    newline so lines never run together.

    Returns:
        Number of lines written
    """
    count = 0
    for value in ordered_values(result, sort_output):
        stream.write(value if line_terminator(value) else value + "\n")
        count += 1
    return count


def result_to_dict(result: LineSet, expression: Optional[str] = None, sort_output: bool = True) -> Dict[str, Any]:
    lines = [value[: len(value) - len(line_terminator(value))] for value in ordered_values(result, sort_output)]
    return {
        "expression": expression,
        "count": len(lines),
        "lines": lines,
    }


def result_to_json(result: LineSet, expression: Optional[str] = None, sort_output: bool = True) -> str:
    return json.dumps(result_to_dict(result, expression, sort_output), indent=2)


def result_to_yaml(result: LineSet, expression: Optional[str] = None, sort_output: bool = True) -> str:
    return yaml.safe_dump(result_to_dict(result, expression, sort_output), sort_keys=False)


__all__ = [
    "ordered_values",
    "emit",
    "result_to_dict",
    "result_to_json",
    "result_to_yaml",
]
