"""Delimited pattern literals

Schema keys and `match` entries written as `/.../`, `#...#` or `%...%` are
regular expressions rather than literal names/values. Trailing `i`, `m`, `s`
and `x` modifiers map to the matching `re` flags; `u` is accepted and ignored.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from fieldguard.core.errors import raise_error, schema_error

_DELIMITED = re.compile(r"([/#%])(.*)\1([imsxu]*)", re.S)

_FLAGS = {"i": re.I, "m": re.M, "s": re.S, "x": re.X, "u": 0}


def is_pattern(value: Any) -> bool:
    """True for compiled patterns and delimiter-wrapped strings."""
    if isinstance(value, re.Pattern):
        return True
    return isinstance(value, str) and len(value) > 1 and _DELIMITED.fullmatch(value) is not None


@lru_cache(maxsize=512)
def _compile(source: str) -> re.Pattern:
    flags = 0
    body = source
    if m := _DELIMITED.fullmatch(source):
        body = m.group(2)
        for modifier in m.group(3):
            flags |= _FLAGS[modifier]
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise_error(schema_error(f"Invalid pattern {source!r}: {e}", pattern=source))


def compile_pattern(pattern: str | re.Pattern) -> re.Pattern:
    """Compile a delimited literal, a bare regex string or pass a compiled pattern through."""
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise_error(schema_error(f"Pattern must be a string, got {type(pattern).__name__}"))
    return _compile(pattern)


def search(pattern: str | re.Pattern, value: Any) -> bool:
    return compile_pattern(pattern).search(str(value)) is not None
