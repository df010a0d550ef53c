"""Field Rules and Schemas

A FieldRule is the declarative description of one field. The key set is
closed: a typo such as `requierd` is a schema fault, not a silent no-op.

A Schema maps field names, or delimited patterns matching field names, to
rules:

    {
        "age":        {"type": "int", "range": "18-65"},
        "nick":       {"required": False, "default": "anon"},
        "/^tag_\\d+$/": {"type": "int", "multiple": True, "filter": "trim"},
    }

Compiling a schema checks every type name, filter name, range and pattern
against the registries before any input is looked at.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fieldguard.core.config import get_settings
from fieldguard.core.errors import (
    invalid_field_name,
    raise_error,
    range_type_mismatch,
    schema_error,
    unknown_options,
)
from fieldguard.core.logging import schema_logger

from .constraints import NUMERIC_KINDS
from .filters import FilterRegistry
from .patterns import compile_pattern, is_pattern
from .ranges import parse_range
from .types import TypeRegistry

log = schema_logger()


class FieldRule(BaseModel):
    """Validation, filtering and casting rule for one field."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    type: str = Field(default_factory=lambda: get_settings().DEFAULT_TYPE)
    required: bool = True
    multiple: bool = False
    disabled: bool = False

    # Constraints
    match: Any = None
    length: Optional[str] = None
    regex: Any = None
    range: Optional[str] = None

    filter: tuple[Any, ...] = ()
    value: Any = None
    default: Any = None
    requires: tuple[str, ...] = ()

    msg: Optional[str] = None
    msg_miss: Optional[str] = None

    # Pattern rules only: keep just the aggregate under the pattern key
    remove_original: bool = False

    @field_validator("length", "range", mode="before")
    @classmethod
    def _spec_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("filter", mode="before")
    @classmethod
    def _filter_list(cls, v: Any) -> Any:
        if not v:
            raise ValueError("Empty filter")
        return tuple(v) if isinstance(v, (list, tuple)) else (v,)

    @field_validator("requires", mode="before")
    @classmethod
    def _requires_list(cls, v: Any) -> Any:
        if v is None:
            return ()
        return tuple(v) if isinstance(v, (list, tuple)) else (v,)

    @classmethod
    def parse(cls, options: "FieldRule | Mapping[str, Any]", *, field: Any = None) -> "FieldRule":
        """Build a rule from a mapping, raising SchemaError for anything malformed."""
        if isinstance(options, FieldRule):
            return options
        if not isinstance(options, Mapping):
            raise_error(schema_error(
                f"Rule for {field} must be a mapping, got {type(options).__name__}", field=field))

        if unknown := [str(key) for key in options if key not in cls.model_fields]:
            raise_error(unknown_options(unknown))

        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in e.errors())
            raise_error(schema_error(f"Invalid rule for {field}: {reasons}", field=field))

    @property
    def numeric_kind(self) -> str | None:
        return self.type if self.type in NUMERIC_KINDS else None

    def check(self, types: TypeRegistry, filters: FilterRegistry) -> None:
        """Fail fast on names and specs that could never be evaluated."""
        types.require(self.type)
        for entry in self.filter:
            filters.require(entry)
        if self.range is not None:
            if self.numeric_kind is None:
                raise_error(range_type_mismatch(self.type))
            parse_range(self.range)
        if self.length is not None:
            parse_range(self.length)
        if self.regex is not None:
            compile_pattern(self.regex)


@dataclass(frozen=True, slots=True)
class PatternEntry:
    """Rule applied to every input field whose name matches `pattern`."""
    key: str
    pattern: re.Pattern
    rule: FieldRule


@dataclass(frozen=True, slots=True)
class Schema:
    """Compiled schema: literal entries first, then pattern entries."""
    literals: tuple[tuple[str, FieldRule], ...] = ()
    patterns: tuple[PatternEntry, ...] = ()

    @classmethod
    def compile(
        cls,
        schema: "Schema | Mapping[str, Any]",
        types: TypeRegistry,
        filters: FilterRegistry,
    ) -> "Schema":
        if isinstance(schema, Schema):
            return schema
        if not isinstance(schema, Mapping):
            raise_error(schema_error(f"Schema must be a mapping, got {type(schema).__name__}"))

        literals: list[tuple[str, FieldRule]] = []
        patterns: list[PatternEntry] = []
        skipped = 0
        for key, options in schema.items():
            if not isinstance(key, str):
                raise_error(invalid_field_name(key))
            rule = FieldRule.parse(options, field=key)
            if rule.disabled:
                skipped += 1
                continue
            rule.check(types, filters)
            if is_pattern(key):
                patterns.append(PatternEntry(key=key, pattern=compile_pattern(key), rule=rule))
            else:
                literals.append((key, rule))

        log.debug("schema_compiled", literals=len(literals), patterns=len(patterns), disabled=skipped)
        return cls(literals=tuple(literals), patterns=tuple(patterns))

    def __len__(self) -> int:
        return len(self.literals) + len(self.patterns)
