"""Range Expressions

    "2-10"  from 2 to 10, inclusive
    "-9"    up to 9
    "10-"   10 and above
    "11"    exactly 11

Bounds are non-negative integers or decimals. Used for numeric `range` and for
string `length` constraints.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Literal

from fieldguard.core.errors import invalid_range_format, invalid_range_order, raise_error

NumericKind = Literal["int", "float"]

_RANGE = re.compile(r"(\d+(?:\.\d+)?)?(-)?(\d+(?:\.\d+)?)?", re.ASCII)


def _bound(text: str | None) -> int | float | None:
    if text is None:
        return None
    return float(text) if "." in text else int(text)


def _number(value: Any, kind: NumericKind) -> int | float:
    if kind == "float":
        return float(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return float(value)


@dataclass(frozen=True, slots=True)
class RangeSpec:
    """Parsed range; an exact spec carries its number in `start`."""
    start: int | float | None = None
    end: int | float | None = None
    exact: bool = False

    def contains(self, value: Any, kind: NumericKind = "int") -> bool:
        if self.exact:
            return _number(value, kind) == _number(self.start, kind)
        number = _number(value, kind)
        if self.start is not None and number < self.start:
            return False
        if self.end is not None and number > self.end:
            return False
        return True


@lru_cache(maxsize=256)
def _parse(spec: str) -> RangeSpec:
    m = _RANGE.fullmatch(spec)
    if m is None or (m.group(1) is None and m.group(3) is None):
        raise_error(invalid_range_format(spec))

    start, end = _bound(m.group(1)), _bound(m.group(3))
    if start is not None and end is not None and start > end:
        raise_error(invalid_range_order(spec))

    if m.group(2) is None:
        # "11": a single number without separator
        return RangeSpec(start=start, exact=True)
    return RangeSpec(start=start, end=end)


def parse_range(spec: str | RangeSpec) -> RangeSpec:
    """Parse a range string. Raises InvalidRangeFormat / InvalidRangeOrder."""
    if isinstance(spec, RangeSpec):
        return spec
    if not isinstance(spec, str):
        raise_error(invalid_range_format(spec))
    return _parse(spec)


def in_range(spec: str | RangeSpec, value: Any, kind: NumericKind = "int") -> bool:
    return parse_range(spec).contains(value, kind)
