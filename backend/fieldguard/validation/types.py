"""Type Predicate Registry

Each type is a pure predicate over one raw scalar. Numbers are tested through
their text form against numeral patterns, never through loose comparison,
so "12abc" is not an int and True is not 1.

Usage:
    types = TypeRegistry()
    types.check("date", "2024-02-30")   # False, not a calendar day
    types.register("hex", lambda v: bool(re.fullmatch(r"[0-9a-f]+", str(v))))
"""
from __future__ import annotations

import json
import re
import sys
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping

from fieldguard.core.errors import raise_error, unknown_type

TypePredicate = Callable[[Any], bool]

INT = re.compile(r"\d+", re.ASCII)
FLOAT = re.compile(r"\d+(?:\.\d+)?", re.ASCII)
NUMERIC = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
EMAIL = re.compile(r"[\w-]+(?:\.[\w-]+)*@(?:[^\W_]|-)+(?:\.(?:[^\W_]|-)+)*\.[^\W\d_]{2,12}")
DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}\s\d{2}:\d{2}:\d{2}", re.ASCII)
TIME = re.compile(r"(?:[01][0-9]|2[0-3]):[0-5][0-9]", re.ASCII)
UNIX_TIME = re.compile(r"\d{10}", re.ASCII)
INT_LIST = re.compile(r"\d+(?:,\d+)*", re.ASCII)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

TRUE_VALUES = frozenset({"true", "1", "yes", "on", "y"})
FALSE_VALUES = frozenset({"false", "0", "no", "off", "n"})


def as_text(value: Any) -> str | None:
    """Text form of a scalar; None for booleans, None and containers."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _matches(pattern: re.Pattern) -> TypePredicate:
    def predicate(value: Any) -> bool:
        text = as_text(value)
        return text is not None and pattern.fullmatch(text) is not None
    return predicate


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_char(value: Any) -> bool:
    text = as_text(value)
    return text is not None and re.search(r"\w", text) is not None


def is_charnum(value: Any) -> bool:
    text = as_text(value)
    return text is not None and re.search(r"[\w\d]", text) is not None


def _reject_constant(token: str):
    raise ValueError(f"{token} is not JSON")


def is_json(value: Any) -> bool:
    """Decodes as JSON to a truthy value. `null`, `false`, `0` and `""` fail too,
    as do the `NaN`/`Infinity` tokens Python would otherwise accept."""
    text = as_text(value)
    if text is None:
        return False
    try:
        return bool(json.loads(text, parse_constant=_reject_constant))
    except ValueError:
        return False


def is_date(value: Any) -> bool:
    text = as_text(value)
    if text is None or (m := DATE.fullmatch(text)) is None:
        return False
    try:
        date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return False
    return True


def is_datetime(value: Any) -> bool:
    text = as_text(value)
    if text is None or not DATETIME.fullmatch(text):
        return False
    try:
        parsed = datetime.strptime(text, DATETIME_FORMAT)
    except ValueError:
        return False
    return parsed.strftime(DATETIME_FORMAT) == text


def is_unix_time(value: Any) -> bool:
    text = as_text(value)
    if text is None or not UNIX_TIME.fullmatch(text):
        return False
    return 0 < int(text) <= sys.maxsize


def is_int_list(value: Any) -> bool:
    text = as_text(value)
    return bool(text) and INT_LIST.fullmatch(text) is not None


def is_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    text = as_text(value)
    return text is not None and text.strip().lower() in TRUE_VALUES | FALSE_VALUES


def is_any(value: Any) -> bool:
    return True


BUILTIN_TYPES: dict[str, TypePredicate] = {
    "int": _matches(INT),
    "float": _matches(FLOAT),
    "numeric": _matches(NUMERIC),
    "string": is_string,
    "char": is_char,
    "charnum": is_charnum,
    "email": _matches(EMAIL),
    "json": is_json,
    "date": is_date,
    "datetime": is_datetime,
    "time": _matches(TIME),
    "unix_time": is_unix_time,
    "int_list": is_int_list,
    "bool": is_bool,
    "any": is_any,
}


class TypeRegistry:
    """Closed mapping from type name to predicate.

    Unknown names are schema faults, raised as UnknownTypeError.
    """

    __slots__ = ("_types",)

    def __init__(self, types: Mapping[str, TypePredicate] | None = None):
        self._types = dict(BUILTIN_TYPES if types is None else types)

    def register(self, name: str, predicate: TypePredicate) -> None:
        """Register (or replace) a type predicate."""
        self._types[name] = predicate

    def has(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._types

    def require(self, name: Any) -> TypePredicate:
        if not self.has(name):
            raise_error(unknown_type(name, self._types))
        return self._types[name]

    def check(self, name: str, value: Any) -> bool:
        return bool(self.require(name)(value))

    def names(self) -> Iterable[str]:
        return self._types.keys()
