"""Input Filters

Pure scalar transforms applied to raw input before it is validated.
Numbers are filtered through their text form; None passes through.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from fieldguard.core.errors import raise_error, unknown_filter

Filter = Callable[[Any], Any]

_TAGS = re.compile(r"<!--.*?-->|<\?.*?\?>|</?[a-zA-Z!][^>]*>", re.S)
_NON_DIGITS = re.compile(r"\D+", re.ASCII)


def _on_text(transform: Callable[[str], str]) -> Filter:
    def apply(value: Any) -> Any:
        if isinstance(value, str):
            return transform(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return transform(str(value))
        return value
    return apply


BUILTIN_FILTERS: dict[str, Filter] = {
    "trim": _on_text(str.strip),
    "strip-html": _on_text(lambda v: _TAGS.sub("", v)),
    "lowercase": _on_text(str.lower),
    "uppercase": _on_text(str.upper),
    "strip-non-digits": _on_text(lambda v: _NON_DIGITS.sub("", v)),
    "normalize-whitespace": _on_text(lambda v: " ".join(v.split())),
}


class FilterRegistry:
    """Closed mapping from filter name to transform."""

    __slots__ = ("_filters",)

    def __init__(self, filters: Mapping[str, Filter] | None = None):
        self._filters = dict(BUILTIN_FILTERS if filters is None else filters)

    def register(self, name: str, transform: Filter) -> None:
        self._filters[name] = transform

    def has(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._filters

    def require(self, name: Any) -> Filter:
        """Resolve a filter entry: a registered name or an inline callable."""
        if callable(name):
            return name
        if not self.has(name):
            raise_error(unknown_filter(name, self._filters))
        return self._filters[name]

    def apply(self, name: Any, value: Any) -> Any:
        return self.require(name)(value)

    def names(self) -> Iterable[str]:
        return self._filters.keys()
