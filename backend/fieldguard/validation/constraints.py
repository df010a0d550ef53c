"""Constraint Tester

Evaluates the constraints a rule declares, in the fixed order
match -> length -> regex -> range, stopping at the first failure. Later
constraints are never evaluated once one has failed.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fieldguard.core.errors import ErrorCode, range_type_mismatch, raise_error

from .patterns import is_pattern, search
from .ranges import in_range, parse_range

if TYPE_CHECKING:
    from .rules import FieldRule

CONSTRAINT_ORDER = ("match", "length", "regex", "range")

NUMERIC_KINDS = frozenset({"int", "float"})

CONSTRAINT_CODES = {
    "match": ErrorCode.E2005_CONSTRAINT_VIOLATION,
    "length": ErrorCode.E2003_OUT_OF_RANGE,
    "regex": ErrorCode.E2002_INVALID_FORMAT,
    "range": ErrorCode.E2003_OUT_OF_RANGE,
}


@dataclass(frozen=True, slots=True)
class ConstraintCheck:
    """Outcome of the last constraint attempted (None when none declared)."""
    passed: bool | None = None
    constraint: str | None = None

    @property
    def code(self) -> ErrorCode | None:
        if self.passed is not False or self.constraint is None:
            return None
        return CONSTRAINT_CODES[self.constraint]


def _as_int(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _same(literal: Any, value: Any, type_name: str) -> bool:
    """Compare a match literal with a value the way the field's type reads it."""
    if type_name == "int":
        left, right = _as_int(literal), _as_int(value)
    elif type_name in ("float", "numeric"):
        left, right = _as_float(literal), _as_float(value)
    else:
        left, right = str(literal), str(value)
    return left is not None and left == right


class ConstraintTester:
    """Runs match/length/regex/range against one scalar value."""

    __slots__ = ()

    def evaluate(self, rule: FieldRule, value: Any) -> ConstraintCheck:
        check = ConstraintCheck()
        for kind in CONSTRAINT_ORDER:
            expected = getattr(rule, kind)
            if expected is None:
                continue
            passed = bool(getattr(self, f"_{kind}")(value, expected, rule))
            check = ConstraintCheck(passed=passed, constraint=kind)
            if not passed:
                break
        return check

    def test(self, rule: FieldRule, value: Any) -> bool | None:
        return self.evaluate(rule, value).passed

    def _match(self, value: Any, expected: Any, rule: FieldRule) -> bool:
        candidates = expected if isinstance(expected, (list, tuple, set, frozenset)) else [expected]
        for candidate in candidates:
            if callable(candidate) and not isinstance(candidate, re.Pattern):
                if candidate(value):
                    return True
            elif is_pattern(candidate):
                if search(candidate, value):
                    return True
            elif _same(candidate, value, rule.type):
                return True
        return False

    def _length(self, value: Any, expected: str, rule: FieldRule) -> bool:
        # len() counts code points, not bytes
        return in_range(expected, len(str(value)), "int")

    def _regex(self, value: Any, expected: Any, rule: FieldRule) -> bool:
        return search(expected, value)

    def _range(self, value: Any, expected: str, rule: FieldRule) -> bool:
        if rule.type not in NUMERIC_KINDS:
            raise_error(range_type_mismatch(rule.type))
        return parse_range(expected).contains(value, rule.type)
