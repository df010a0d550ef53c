"""Validation Session

Orchestrates one bag of input against a schema and holds the results:

    session = ValidationSession({"age": "15"}).validate_all({
        "age": {"type": "int", "range": "18-65", "msg": "Adults only"},
    })
    session.valid     # {}
    session.invalid   # {"age": "15"}
    session.errors    # {"age": Failure(...)}

Field failures are accumulated, never raised. Every Failure must be
acknowledged before the session is audited:

    with ValidationSession(bag) as session:
        session.validate_all(schema)
        for failure in session.errors.values():
            flash(failure.message())
    # leaving the block audits; unread failures raise UnhandledFailureError
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, MutableMapping

from fieldguard.core.config import get_settings
from fieldguard.core.errors import (
    AppError,
    Err,
    Ok,
    Result,
    invalid_field_name,
    missing_dependency,
    pattern_collision,
    raise_error,
    raise_result,
    required_field,
    unhandled_failures,
    validation_error,
)
from fieldguard.core.logging import session_logger

from .dependencies import DependencyResolver
from .failure import Failure, construction_site
from .filters import FilterRegistry
from .patterns import compile_pattern, is_pattern
from .resolver import FieldOutcome, FieldResolver, Outcome
from .rules import FieldRule, PatternEntry, Schema
from .types import TypeRegistry

log = session_logger()


class ErrorMode(str, Enum):
    """How field failures are stored in `errors`."""
    FAILURES = "failures"  # Failure objects, must be acknowledged
    MESSAGES = "messages"  # Plain strings


class ValidationSession:
    """Validates an input bag and exposes `valid`, `invalid` and `errors`.

    Pattern rules store, besides each matched field, an aggregate sub-dict
    under the pattern key itself, e.g. `valid["/^tag_\\d+$/"] = {"tag_1": 1}`.
    """

    def __init__(
        self,
        fields: MutableMapping[str, Any] | Mapping[str, Any] | None = None,
        mode: ErrorMode | str | None = None,
        *,
        types: TypeRegistry | None = None,
        filters: FilterRegistry | None = None,
        audit_on_exit: bool | None = None,
    ):
        settings = get_settings()
        if fields is None:
            fields = {}
        self.fields = fields if isinstance(fields, MutableMapping) else dict(fields)
        self.mode = ErrorMode(mode or settings.ERROR_MODE)
        self.types = types or TypeRegistry()
        self.filters = filters or FilterRegistry()
        self.audit_on_exit = settings.AUDIT_ON_EXIT if audit_on_exit is None else audit_on_exit

        self.valid: dict[str, Any] = {}
        self.invalid: dict[str, Any] = {}
        self.errors: dict[str, Any] = {}

        # field -> pattern keys it was aggregated under
        self._groups: dict[str, list[str]] = {}
        self._resolver = FieldResolver(self.types, self.filters)
        self._dependencies = DependencyResolver()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def validate_all(self, schema: Schema | Mapping[str, Any]) -> ValidationSession:
        """Reset results, validate every rule, then run the dependency pass."""
        self.clear()
        compiled = Schema.compile(schema, self.types, self.filters)
        log.debug(
            "validation_started",
            fields=len(self.fields),
            literals=len(compiled.literals),
            patterns=len(compiled.patterns),
        )

        for field, rule in compiled.literals:
            self._validate(field, rule)
        for entry in compiled.patterns:
            self._validate_group(entry)
        self.resolve_dependencies()

        log.info(
            "validation_finished",
            valid=len(self.valid),
            invalid=len(self.invalid),
            errors=len(self.errors),
        )
        return self

    def validate(self, field: str, rule: FieldRule | Mapping[str, Any]) -> None:
        """Validate a single field (or pattern key) without the dependency pass."""
        if not isinstance(field, str):
            raise_error(invalid_field_name(field))
        rule = FieldRule.parse(rule, field=field)
        if rule.disabled:
            return
        rule.check(self.types, self.filters)

        if is_pattern(field):
            self._validate_group(PatternEntry(key=field, pattern=compile_pattern(field), rule=rule))
        else:
            self._validate(field, rule)

    def resolve_dependencies(self) -> None:
        """Demote valid fields whose `requires` prerequisites are not valid."""
        self._dependencies.resolve(self._is_valid, self._demote)

    def clear(self, field: str | None = None) -> None:
        """Reset results for one field, or for the whole session. The bag is kept."""
        if field is None:
            self.valid.clear()
            self.invalid.clear()
            self.errors.clear()
            self._groups.clear()
            self._dependencies.discard()
            return
        self._drop(field)
        for key in self._groups.pop(field, ()):
            for results in (self.valid, self.invalid, self.errors):
                group = results.get(key)
                if isinstance(group, dict) and field in group:
                    del group[field]
                    if not group:
                        del results[key]
        self._dependencies.discard(field)

    def has_errors(self) -> bool:
        return bool(self.errors)

    # ------------------------------------------------------------------
    # Acknowledgement audit
    # ------------------------------------------------------------------

    def unhandled(self) -> list[Failure]:
        """Failures nobody has acknowledged yet, including pattern aggregates."""
        pending: list[Failure] = []
        seen: set[int] = set()
        for entry in self.errors.values():
            for error in entry.values() if isinstance(entry, dict) else (entry,):
                if isinstance(error, Failure) and not error.is_handled() and id(error) not in seen:
                    seen.add(id(error))
                    pending.append(error)
        return pending

    def check_handled(self) -> Result[None, AppError]:
        pending = self.unhandled()
        if not pending:
            return Ok(None)
        return unhandled_failures({failure.name: failure.origin for failure in pending})

    def audit(self) -> None:
        """Raise UnhandledFailureError if any Failure was never acknowledged."""
        result = self.check_handled()
        if isinstance(result, Err):
            fields = result.unwrap_err().metadata["fields"]
            log.error("failures_unhandled", fields=fields, count=len(fields))
        raise_result(result)

    def __enter__(self) -> ValidationSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None and self.audit_on_exit:
            self.audit()
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, field: str, rule: FieldRule) -> None:
        self._store(self._resolver.resolve(field, rule, self.fields))

    def _validate_group(self, entry: PatternEntry) -> None:
        if entry.key in self.fields:
            raise_error(pattern_collision(entry.key))

        for field in list(self.fields):
            if not isinstance(field, str) or not entry.pattern.search(field):
                continue
            self._validate(field, entry.rule)
            self._aggregate(entry.key, field)
            if entry.rule.remove_original:
                self._drop(field)

    def _store(self, outcome: FieldOutcome) -> None:
        field = outcome.field
        if outcome.status is Outcome.SKIPPED:
            return
        self._drop(field)
        # Edges follow the rule the field was last stored under
        self._dependencies.discard(field)

        match outcome.status:
            case Outcome.VALID:
                self.valid[field] = outcome.value
                if outcome.requires:
                    self._dependencies.record(field, outcome.requires)
            case Outcome.OPTIONAL:
                self.valid[field] = None
            case Outcome.INVALID:
                log.debug("field_invalid", field=field, code=outcome.code.name)
                self.invalid[field] = outcome.value
                self.errors[field] = self._error(validation_error(
                    field, outcome.message, code=outcome.code, origin=construction_site()))
            case Outcome.MISSING:
                log.debug("field_missing", field=field)
                self.invalid[field] = None
                self.errors[field] = self._error(
                    required_field(field, outcome.message, origin=construction_site()))

    def _aggregate(self, key: str, field: str) -> None:
        for results in (self.valid, self.invalid, self.errors):
            if field in results:
                results.setdefault(key, {})[field] = results[field]
        groups = self._groups.setdefault(field, [])
        if key not in groups:
            groups.append(key)

    def _drop(self, field: str) -> None:
        self.valid.pop(field, None)
        self.invalid.pop(field, None)
        self.errors.pop(field, None)

    def _error(self, result: Err[AppError]) -> Failure | str:
        error = result.unwrap_err()
        if self.mode is ErrorMode.MESSAGES:
            return error.message
        return Failure(error)

    def _is_valid(self, field: str) -> bool:
        if field in self.valid:
            return True
        return any(field in self.valid.get(key, {}) for key in self._groups.get(field, ()))

    def _demote(self, field: str, prerequisite: str) -> None:
        log.debug("dependency_unmet", field=field, requires=prerequisite)
        error = self._error(missing_dependency(field, prerequisite, origin=construction_site()))

        if field in self.valid:
            self.invalid[field] = self.valid.pop(field)
            self.errors[field] = error
        for key in self._groups.get(field, ()):
            group = self.valid.get(key)
            if not group or field not in group:
                continue
            self.invalid.setdefault(key, {})[field] = group.pop(field)
            self.errors.setdefault(key, {})[field] = error
            if not group:
                del self.valid[key]
