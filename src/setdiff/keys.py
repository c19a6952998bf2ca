"""
Comparison keys.

A line's key is what the set operators compare. By default it is the
line with surrounding whitespace removed. With column selection, the
line is split on '|' and only the requested fields, in the requested
order, make up the key. With normalization, all whitespace is removed
and letters are upper-cased so 'abc 1' and 'ABC1' compare equal.
"""

import logging
import re
from typing import List, Sequence

DELIMITER = "|"

_WHITESPACE_RE = re.compile(r"\s+")

log = logging.getLogger(__name__)


def normalize_text(text: str) -> str:
    """Remove every whitespace character and upper-case the rest."""
    return _WHITESPACE_RE.sub("", text).upper()


def trim(text: str, normalize: bool = False) -> str:
    """
    Strip leading and trailing whitespace (including the line terminator).

    With ``normalize`` the result is also passed through normalize_text.
    Idempotent either way.
    """
    text = text.strip()
    if normalize:
        text = normalize_text(text)
    return text


def split_fields(line: str) -> List[str]:
    """
    Split a line on '|'.

    Trailing empty fields are dropped ("a|b|" has two fields); interior
    empty fields are kept ("a||c" has three).
    """
    parts = line.split(DELIMITER)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def project_columns(line: str, columns: Sequence[int], trailing_delimiter: bool = False) -> str:
    """
    Rebuild ``line`` from the selected columns.

    Lines with fewer than two fields are returned unchanged. Column
    numbers beyond the end of the line are skipped.
    """
    parts = split_fields(line)
    if len(parts) < 2:
        return line
    selected = [parts[i] for i in columns if i < len(parts)]
    projected = DELIMITER.join(selected)
    if trailing_delimiter:
        projected += DELIMITER
    log.debug("projected %r -> %r", line, projected)
    return projected


def derive_key(
    raw: str,
    columns: Sequence[int] = (),
    normalize: bool = False,
    trailing_delimiter: bool = False,
) -> str:
    """
    Compute the comparison key of a raw line.

    Args:
        raw: the line as read, terminator included
        columns: 0-based columns forming the key; empty for the whole line
        normalize: drop all whitespace and upper-case
        trailing_delimiter: append '|' to projected keys

    Returns:
        The key. It never contains the line terminator.
    """
    key = trim(raw, normalize)
    if columns:
        key = project_columns(key, columns, trailing_delimiter)
    return key


__all__ = [
    "DELIMITER",
    "normalize_text",
    "trim",
    "split_fields",
    "project_columns",
    "derive_key",
]
