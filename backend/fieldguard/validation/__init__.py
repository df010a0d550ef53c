"""Declarative Field Validation

Key components:
- ValidationSession: validates an input bag against a schema
- FieldRule / Schema: closed-key rule model, compiled fail-fast
- TypeRegistry / FilterRegistry: named predicates and transforms
- Failure: field failure that must be acknowledged before audit

Usage:
    from fieldguard.validation import ValidationSession

    session = ValidationSession(request_fields).validate_all({
        "email": {"type": "email", "filter": ["trim", "lowercase"]},
        "age": {"type": "int", "range": "18-65", "required": False},
        "/^tag_\\d+$/": {"type": "int", "multiple": True},
    })
    if session.has_errors():
        return [failure.message() for failure in session.errors.values()]
"""
from .constraints import ConstraintCheck, ConstraintTester
from .dependencies import DependencyResolver
from .failure import Failure, construction_site
from .filters import BUILTIN_FILTERS, FilterRegistry
from .patterns import compile_pattern, is_pattern
from .ranges import RangeSpec, in_range, parse_range
from .resolver import FieldOutcome, FieldResolver, Outcome, cast_value
from .rules import FieldRule, PatternEntry, Schema
from .session import ErrorMode, ValidationSession
from .types import BUILTIN_TYPES, TypeRegistry

__all__ = [
    # Session
    "ValidationSession",
    "ErrorMode",
    "Failure",
    "construction_site",
    # Rules
    "FieldRule",
    "PatternEntry",
    "Schema",
    # Registries
    "TypeRegistry",
    "BUILTIN_TYPES",
    "FilterRegistry",
    "BUILTIN_FILTERS",
    # Constraints
    "RangeSpec",
    "parse_range",
    "in_range",
    "ConstraintTester",
    "ConstraintCheck",
    "compile_pattern",
    "is_pattern",
    # Resolution
    "FieldResolver",
    "FieldOutcome",
    "Outcome",
    "cast_value",
    "DependencyResolver",
]
