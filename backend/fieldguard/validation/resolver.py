"""Single-Field Resolution

Decision procedure for one field against one rule:

    1. disabled          -> skipped, no result entry at all
    2. filter            -> rewrite the raw value (element-wise for multiple)
    3. presence          -> override, else input; "" counts as absent;
                            default only for absent, non-required fields
    4. validity          -> None (missing) | False (invalid) | True
    5. outcome + cast    -> typed value for valid fields

    Required and missing values : error (missing message)
    Required and invalid values : error
    Not required and missing    : valid placeholder, no error
    Not required and invalid    : error
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, MutableMapping, NamedTuple

from fieldguard.core.errors import ErrorCode, raise_error, unmarked_multiple

from .constraints import ConstraintTester
from .filters import FilterRegistry
from .rules import FieldRule
from .types import FALSE_VALUES, INT, TRUE_VALUES, TypeRegistry, as_text


class Outcome(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    MISSING = "missing"
    OPTIONAL = "optional"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class FieldOutcome:
    field: str
    status: Outcome
    value: Any = None
    message: str | None = None
    code: ErrorCode | None = None
    requires: tuple[str, ...] = ()


class Verdict(NamedTuple):
    passed: bool | None
    code: ErrorCode | None = None


def is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def is_multi(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# ============================================================================
# Type casting (valid outcomes only)
# ============================================================================

def _to_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return int(float(value))


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = as_text(value)
    if text is not None and text.strip().lower() in TRUE_VALUES | FALSE_VALUES:
        return text.strip().lower() in TRUE_VALUES
    return bool(value)


def _to_numeric(value: Any) -> int | float:
    """int when the text is all digits, float otherwise."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value)
    return int(text) if INT.fullmatch(text) else float(text)


def _to_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


CASTS: dict[str, Callable[[Any], Any]] = {
    "int": _to_int,
    "float": float,
    "string": _to_text,
    "char": _to_text,
    "bool": _to_bool,
    "numeric": _to_numeric,
}


def cast_value(value: Any, type_name: str) -> Any:
    """Cast a scalar, or each element of a list, to the declared type."""
    caster = CASTS.get(type_name, _to_text)
    if is_multi(value):
        return [None if item is None else caster(item) for item in value]
    return None if value is None else caster(value)


# ============================================================================
# Resolver
# ============================================================================

class FieldResolver:
    """Owns the per-field pipeline. Mutates the input bag when filtering."""

    __slots__ = ("types", "filters", "constraints")

    def __init__(
        self,
        types: TypeRegistry,
        filters: FilterRegistry,
        constraints: ConstraintTester | None = None,
    ):
        self.types = types
        self.filters = filters
        self.constraints = constraints or ConstraintTester()

    def resolve(self, field: str, rule: FieldRule, fields: MutableMapping[str, Any]) -> FieldOutcome:
        if rule.disabled:
            return FieldOutcome(field, Outcome.SKIPPED)

        override = self.filter(field, rule, fields)
        value = self.lookup(field, rule, fields, override)
        verdict = self.evaluate(value, rule)
        message = rule.msg or f"Invalid field {field}"

        if verdict.passed:
            return FieldOutcome(
                field, Outcome.VALID, cast_value(value, rule.type), requires=rule.requires)
        if verdict.passed is False:
            return FieldOutcome(field, Outcome.INVALID, value, message, verdict.code)
        if rule.required:
            return FieldOutcome(
                field, Outcome.MISSING, None, rule.msg_miss or message,
                ErrorCode.E2001_REQUIRED_FIELD_MISSING)
        return FieldOutcome(field, Outcome.OPTIONAL)

    def filter(self, field: str, rule: FieldRule, fields: MutableMapping[str, Any]) -> Any:
        """Apply declared filters in order. Returns the (filtered) override value."""
        override = rule.value
        for entry in rule.filter:
            transform = self.filters.require(entry)
            if override is not None:
                override = self._apply(transform, override, field, rule)
            elif fields.get(field) is not None:
                fields[field] = self._apply(transform, fields[field], field, rule)
        return override

    def _apply(self, transform: Callable[[Any], Any], value: Any, field: str, rule: FieldRule) -> Any:
        if is_multi(value):
            if not rule.multiple:
                raise_error(unmarked_multiple(field))
            return [transform(item) for item in value]
        return transform(value)

    def lookup(self, field: str, rule: FieldRule, fields: MutableMapping[str, Any], override: Any = None) -> Any:
        value = override if override is not None else fields.get(field)
        if is_absent(value) and rule.default is not None and not rule.required:
            value = rule.default
        return value

    def evaluate(self, value: Any, rule: FieldRule) -> Verdict:
        if is_absent(value):
            return Verdict(None)
        multi = is_multi(value)
        if rule.multiple and rule.required and not multi:
            # A required list that arrived as one value counts as missing
            return Verdict(None)
        if multi and not rule.multiple:
            return Verdict(False, ErrorCode.E2004_INVALID_TYPE)

        predicate = self.types.require(rule.type)
        for item in value if multi else (value,):
            if not predicate(item):
                return Verdict(False, ErrorCode.E2004_INVALID_TYPE)
            check = self.constraints.evaluate(rule, item)
            if check.passed is False:
                return Verdict(False, check.code)
        return Verdict(True)

    def valid(self, value: Any, rule: FieldRule) -> bool | None:
        """True (valid), False (invalid) or None (missing)."""
        return self.evaluate(value, rule).passed
