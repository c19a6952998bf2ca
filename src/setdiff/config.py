"""
Run configuration for setdiff.

A Configuration is resolved once per run (defaults, then an optional
YAML/JSON file, then command-line flags) and is read-only afterwards.
It is passed explicitly into the key deriver, the loader and the set
operators; nothing in the package reads option state from globals.

Config file format (YAML or JSON):

    columns_lhs: [0, 1]
    columns_rhs: "c0,c1"
    merge_columns: [2]
    normalize: false
    force_trailing_delimiter: false
    debug: false
    sort_output: true
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import yaml

from setdiff.errors import SetDiffError


class ConfigurationError(SetDiffError, ValueError):
    """Raised for invalid column lists or malformed config files."""
    pass


Columns = Tuple[int, ...]

_COLUMN_RE = re.compile(r"^[cC]?(\d+)$")


@dataclass(frozen=True)
class Configuration:
    """
    Immutable options consumed by the comparison core.

    Properties:
        columns_lhs: columns forming the key of the first operand
        columns_rhs: columns forming the key of every later operand
        merge_columns: columns of the right-hand line appended to the
            left-hand line on an AND match
        normalize: strip all whitespace and upper-case keys
        force_trailing_delimiter: end projected keys with '|'
        debug: emit debug traces to the diagnostic log
        sort_output: emit results in key order (False keeps insertion order)

    Empty column tuples mean "compare whole lines".
    """

    columns_lhs: Columns = ()
    columns_rhs: Columns = ()
    merge_columns: Columns = ()
    normalize: bool = False
    force_trailing_delimiter: bool = False
    debug: bool = False
    sort_output: bool = True

    def __post_init__(self):
        for name in ("columns_lhs", "columns_rhs", "merge_columns"):
            object.__setattr__(self, name, coerce_columns(getattr(self, name), name))

    def with_overrides(self, **overrides: Any) -> "Configuration":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def parse_columns(text: str) -> Columns:
    """
    Parse a column list such as ``c0,c3,c4`` or ``0,3,4``.

    The 'c' prefix is optional. A single column needs no comma.

    Raises:
        ConfigurationError: on a malformed entry, or when no column is given
    """
    columns = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        match = _COLUMN_RE.match(part)
        if match is None:
            raise ConfigurationError(f"invalid column '{part}' in '{text}'")
        columns.append(int(match.group(1)))
    if not columns:
        raise ConfigurationError(f"no valid columns selected in '{text}'")
    return tuple(columns)


def coerce_columns(value: Union[None, str, int, Iterable[Any]], name: str = "columns") -> Columns:
    """Accept a column string, a single int, or a sequence of either."""
    if value is None:
        return ()
    if isinstance(value, str):
        return parse_columns(value) if value.strip() else ()
    if isinstance(value, bool):
        raise ConfigurationError(f"{name}: expected column numbers, got {value!r}")
    if isinstance(value, int):
        value = (value,)

    columns = []
    for item in value:
        if isinstance(item, bool):
            raise ConfigurationError(f"{name}: invalid column {item!r}")
        if isinstance(item, int):
            if item < 0:
                raise ConfigurationError(f"{name}: negative column {item}")
            columns.append(item)
        elif isinstance(item, str):
            columns.extend(parse_columns(item))
        else:
            raise ConfigurationError(f"{name}: invalid column {item!r}")
    return tuple(columns)


_FIELD_NAMES = tuple(f.name for f in fields(Configuration))
_BOOL_FIELDS = ("normalize", "force_trailing_delimiter", "debug", "sort_output")


def config_to_dict(config: Configuration) -> Dict[str, Any]:
    return {
        "columns_lhs": list(config.columns_lhs),
        "columns_rhs": list(config.columns_rhs),
        "merge_columns": list(config.merge_columns),
        "normalize": config.normalize,
        "force_trailing_delimiter": config.force_trailing_delimiter,
        "debug": config.debug,
        "sort_output": config.sort_output,
    }


def config_from_dict(d: Optional[Dict[str, Any]], base: Optional[Configuration] = None) -> Configuration:
    """
    Build a Configuration from a plain dict, layered over ``base``.

    Raises:
        ConfigurationError: on unknown keys or wrongly typed values
    """
    base = base or Configuration()
    if not d:
        return base
    if not isinstance(d, dict):
        raise ConfigurationError(f"configuration must be a mapping, got {type(d).__name__}")

    unknown = sorted(set(d) - set(_FIELD_NAMES))
    if unknown:
        raise ConfigurationError(f"unknown configuration keys: {unknown}")

    for key in _BOOL_FIELDS:
        if key in d and not isinstance(d[key], bool):
            raise ConfigurationError(f"{key}: expected true/false, got {d[key]!r}")

    return replace(base, **d)


def load_config_file(path: str, base: Optional[Configuration] = None) -> Configuration:
    """
    Load a YAML or JSON configuration file.

    Files ending in ``.json`` are read as JSON, everything else as YAML.

    Raises:
        ConfigurationError: if the file is missing, unreadable or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file '{path}': {exc}") from exc

    try:
        if os.path.splitext(path)[1].lower() == ".json":
            data = json.loads(text) if text.strip() else None
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"malformed config file '{path}': {exc}") from exc

    return config_from_dict(data, base=base)


__all__ = [
    "Configuration",
    "ConfigurationError",
    "Columns",
    "parse_columns",
    "coerce_columns",
    "config_to_dict",
    "config_from_dict",
    "load_config_file",
]
