"""
Set operators over LineSets.

    OR   union         keys of either side; right side's line wins on a shared key
    AND  intersection  keys of both sides; left side's line, optionally
                       extended with merge columns from the right line
    NOT  difference    keys of the left side absent from the right side

None of the operators mutate their inputs; each returns a new LineSet
whose key order is the left operand's order followed by any keys new
from the right operand.
"""

from typing import Optional

from setdiff.config import Configuration
from setdiff.diagnostics import Diagnostics, EmptyOperandWarning
from setdiff.errors import SetDiffError
from setdiff.expressions import Operator
from setdiff.keys import DELIMITER, split_fields, trim
from setdiff.lineset import LineSet


class UnknownOperatorError(SetDiffError):
    """
    Raised when asked to apply something that is not an Operator.

    The tokenizer only produces known operators, so reaching this is an
    internal error rather than a user mistake.
    """
    pass


def union(lhs: LineSet, rhs: LineSet) -> LineSet:
    table = dict(lhs)
    table.update(rhs)
    return LineSet(table)


def line_terminator(raw: str) -> str:
    """Return the line ending of ``raw`` ('' when it has none)."""
    if raw.endswith("\r\n"):
        return "\r\n"
    if raw.endswith("\n") or raw.endswith("\r"):
        return raw[-1]
    return ""


def merge_line(lhs_raw: str, rhs_raw: str, merge_columns) -> str:
    """
    Append the ``merge_columns`` of ``rhs_raw`` to ``lhs_raw``.

    The appended fields are '|' separated and always end with '|', e.g.
    '11111|CD|5' merged with column 2 of '11111|CD|24' gives
    '11111|CD|5|24|'. If the right line has none of the requested
    columns, ``lhs_raw`` is returned as is. An existing but empty field
    still counts as a column and is appended empty.
    """
    text = trim(rhs_raw)
    parts = split_fields(text)
    if len(parts) < 2:
        appended = text
    else:
        selected = [parts[i] for i in merge_columns if i < len(parts)]
        if not selected:
            return lhs_raw
        appended = DELIMITER.join(selected)

    terminator = line_terminator(lhs_raw) or "\n"
    body = lhs_raw[: len(lhs_raw) - len(line_terminator(lhs_raw))]
    if not body.endswith(DELIMITER):
        body += DELIMITER
    return body + appended + DELIMITER + terminator


def intersect(lhs: LineSet, rhs: LineSet, merge_columns=()) -> LineSet:
    table = {}
    for key, raw in lhs.items():
        if key not in rhs:
            continue
        if merge_columns:
            raw = merge_line(raw, rhs[key], merge_columns)
        table[key] = raw
    return LineSet(table)


def difference(lhs: LineSet, rhs: LineSet) -> LineSet:
    return LineSet({key: raw for key, raw in lhs.items() if key not in rhs})


def apply_operator(
    operator: Operator,
    lhs: LineSet,
    rhs: LineSet,
    config: Configuration,
    diagnostics: Optional[Diagnostics] = None,
) -> LineSet:
    """
    Apply ``operator`` to two operands.

    An empty operand is reported through ``diagnostics`` (once per run)
    and the operation still goes ahead.

    Raises:
        UnknownOperatorError: if ``operator`` is not an Operator
    """
    diagnostics = diagnostics or Diagnostics()
    name = getattr(operator, "value", operator)

    if not lhs or not rhs:
        diagnostics.empty_operand(str(name), len(lhs), len(rhs))

    if operator is Operator.OR:
        result = union(lhs, rhs)
    elif operator is Operator.AND:
        result = intersect(lhs, rhs, config.merge_columns)
    elif operator is Operator.NOT:
        result = difference(lhs, rhs)
    else:
        raise UnknownOperatorError(f"unknown operation '{name}'")

    diagnostics.trace("%s: %d %s %d -> %d", name, len(lhs), name, len(rhs), len(result))
    return result


__all__ = [
    "UnknownOperatorError",
    "EmptyOperandWarning",
    "union",
    "intersect",
    "difference",
    "merge_line",
    "line_terminator",
    "apply_operator",
]
