"""
Line sets: one operand's lines keyed by their comparison key.

A LineSet maps key -> raw line (terminator included) in first-seen key
order. It is built once by the loader and never modified afterwards;
the set operators always allocate a new LineSet for their result.

Within one file, a later line with the same key replaces the earlier
one (last line wins) but keeps the key's original position.
"""

import logging
import os
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Sequence

from setdiff.config import Configuration
from setdiff.errors import SetDiffError
from setdiff.keys import derive_key

log = logging.getLogger(__name__)

# Bytes sniffed to decide whether a file is text.
TEXT_SNIFF_BYTES = 512


class OperandReadError(SetDiffError, OSError):
    """Raised when an operand file cannot be opened or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"error reading '{path}': {reason}")
        self.path = path
        self.reason = reason


class LineSet(Mapping):
    """
    Read-only ordered mapping of comparison key to raw line.

    Equality follows Mapping semantics, so a LineSet compares equal to
    a dict with the same items.
    """

    __slots__ = ("_lines",)

    def __init__(self, lines: Optional[Dict[str, str]] = None):
        self._lines = dict(lines) if lines else {}

    def __getitem__(self, key: str) -> str:
        return self._lines[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, key: object) -> bool:
        return key in self._lines

    def __repr__(self) -> str:
        return f"LineSet({self._lines!r})"


def load_line_set(lines: Iterable[str], columns: Sequence[int], config: Configuration) -> LineSet:
    """
    Build a LineSet from a sequence of raw lines.

    Consumes ``lines`` exactly once. Each line is keyed with
    keys.derive_key using ``columns`` and the normalization and
    trailing-delimiter settings of ``config``.

    Args:
        lines: raw lines, terminators included (e.g. an open text file)
        columns: key columns for this operand (empty for whole lines)
        config: run configuration

    Returns:
        LineSet of key -> last raw line seen with that key
    """
    table: Dict[str, str] = {}
    for raw in lines:
        key = derive_key(
            raw,
            columns,
            normalize=config.normalize,
            trailing_delimiter=config.force_trailing_delimiter,
        )
        table[key] = raw
    return LineSet(table)


def looks_like_text_file(path: str) -> bool:
    """
    True if ``path`` is an existing regular file that looks like text.

    A file is taken as text when its first block contains no NUL byte.
    Missing paths and directories are simply not operands.

    Raises:
        OperandReadError: if the file exists but cannot be opened
    """
    if not os.path.isfile(path):
        return False
    try:
        with open(path, "rb") as fh:
            head = fh.read(TEXT_SNIFF_BYTES)
    except OSError as exc:
        raise OperandReadError(path, exc.strerror or str(exc)) from exc
    return b"\0" not in head


def load_line_set_file(
    path: str,
    columns: Sequence[int],
    config: Configuration,
    encoding: str = "utf-8",
) -> LineSet:
    """
    Load one operand file into a LineSet.

    Line terminators are kept as they appear in the file.

    Raises:
        OperandReadError: if the file cannot be opened or decoded
    """
    try:
        with open(path, "r", encoding=encoding, newline="") as fh:
            line_set = load_line_set(fh, columns, config)
    except UnicodeDecodeError as exc:
        raise OperandReadError(path, f"not valid {encoding} text ({exc.reason})") from exc
    except OSError as exc:
        raise OperandReadError(path, exc.strerror or str(exc)) from exc

    log.debug("loaded '%s': %d distinct keys", path, len(line_set))
    return line_set


__all__ = [
    "LineSet",
    "OperandReadError",
    "load_line_set",
    "load_line_set_file",
    "looks_like_text_file",
]
