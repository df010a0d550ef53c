"""Domain-Specific Error Builders

Ergonomic constructors for typed errors. Each builder creates an AppError
with the appropriate code and context wrapped in Err.
"""
from typing import Any, Iterable

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Field Validation Errors (E2xxx / E5xxx)
# =============================================================================

def validation_error(
    field: str,
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create a field validation error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={"field": field, **metadata},
    ))


def required_field(field: str, message: str | None = None, origin: str = "") -> Err[AppError]:
    return validation_error(
        field,
        message or f"Missing field {field}",
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        origin=origin,
    )


def missing_dependency(field: str, prerequisite: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        field,
        f"Missing required field: {prerequisite}",
        code=ErrorCode.E5020_DEPENDENCY_ERROR,
        origin=origin,
        requires=prerequisite,
    )


# =============================================================================
# Schema Authoring Errors (E7xxx)
# =============================================================================

def schema_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E7000_SCHEMA_GENERIC,
    origin: str = "schema",
    **metadata,
) -> Err[AppError]:
    """Create schema authoring error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def unknown_type(type_name: Any, available: Iterable[str] = ()) -> Err[AppError]:
    return schema_error(
        f"Unknown type: {type_name}",
        code=ErrorCode.E7001_UNKNOWN_TYPE,
        type=str(type_name),
        available=sorted(available) or None,
    )


def unknown_filter(filter_name: Any, available: Iterable[str] = ()) -> Err[AppError]:
    return schema_error(
        f"Missing filter {filter_name}",
        code=ErrorCode.E7002_UNKNOWN_FILTER,
        filter=str(filter_name),
        available=sorted(available) or None,
    )


def unknown_options(options: Iterable[str]) -> Err[AppError]:
    names = list(options)
    return schema_error(
        f"Unknown options: {', '.join(names)}",
        code=ErrorCode.E7003_UNKNOWN_OPTION,
        options=names,
    )


def invalid_range_format(spec: Any) -> Err[AppError]:
    return schema_error(
        f"Invalid range {spec!r}. Format is from-to (1-10 for example)",
        code=ErrorCode.E7004_INVALID_RANGE_FORMAT,
        range=str(spec),
    )


def invalid_range_order(spec: str) -> Err[AppError]:
    return schema_error(
        f"Right side of range {spec!r} is smaller than the left one",
        code=ErrorCode.E7005_INVALID_RANGE_ORDER,
        range=spec,
    )


def range_type_mismatch(type_name: str) -> Err[AppError]:
    return schema_error(
        f"Invalid type {type_name} for range. Allowed types are int or float",
        code=ErrorCode.E7006_RANGE_TYPE_MISMATCH,
        type=type_name,
    )


def invalid_field_name(field: Any) -> Err[AppError]:
    return schema_error(
        f"Field name must be a string, got {type(field).__name__}",
        code=ErrorCode.E7007_INVALID_FIELD_NAME,
    )


def pattern_collision(pattern: str) -> Err[AppError]:
    return schema_error(
        f"Field {pattern} is a pattern, but exists literally in the input",
        code=ErrorCode.E7008_PATTERN_COLLISION,
        field=pattern,
    )


def unmarked_multiple(field: str) -> Err[AppError]:
    return schema_error(
        f"Field {field} is a list, but its rule is not marked multiple",
        code=ErrorCode.E7009_UNMARKED_MULTIPLE,
        field=field,
    )


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def unhandled_failures(fields: dict[str, str]) -> Err[AppError]:
    """Create error for failures nobody acknowledged.

    Args:
        fields: Field name mapped to the site where its failure was constructed.
    """
    sites = ", ".join(f'"{name}" (created at {site})' for name, site in fields.items())
    return Err(AppError(
        code=ErrorCode.E9003_ASSERTION_FAILED,
        message=f"Unhandled validation failures: {sites}",
        context=ErrorContext(origin="audit"),
        metadata={"fields": list(fields)},
    ))
