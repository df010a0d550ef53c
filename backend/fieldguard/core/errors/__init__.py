"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction
- AppErrorException hierarchy: raised form of schema faults

Usage:
    from fieldguard.core.errors import raise_error, unknown_type

    if not registry.has(name):
        raise_error(unknown_type(name, registry.names()))
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    ensure,
)

from .builders import (
    # Validation (E2xxx / E5xxx)
    validation_error,
    required_field,
    missing_dependency,
    # Schema (E7xxx)
    schema_error,
    unknown_type,
    unknown_filter,
    unknown_options,
    invalid_range_format,
    invalid_range_order,
    range_type_mismatch,
    invalid_field_name,
    pattern_collision,
    unmarked_multiple,
    # Internal (E9xxx)
    unhandled_failures,
)

from .exceptions import (
    AppErrorException,
    SchemaError,
    UnknownTypeError,
    UnknownFilterError,
    UnknownOptionError,
    InvalidRangeFormat,
    InvalidRangeOrder,
    RangeTypeError,
    InvalidFieldNameError,
    PatternCollisionError,
    UnmarkedMultipleError,
    UnhandledFailureError,
    raise_error,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "ensure",
    # Validation (E2xxx / E5xxx)
    "validation_error",
    "required_field",
    "missing_dependency",
    # Schema (E7xxx)
    "schema_error",
    "unknown_type",
    "unknown_filter",
    "unknown_options",
    "invalid_range_format",
    "invalid_range_order",
    "range_type_mismatch",
    "invalid_field_name",
    "pattern_collision",
    "unmarked_multiple",
    # Internal (E9xxx)
    "unhandled_failures",
    # Exceptions
    "AppErrorException",
    "SchemaError",
    "UnknownTypeError",
    "UnknownFilterError",
    "UnknownOptionError",
    "InvalidRangeFormat",
    "InvalidRangeOrder",
    "RangeTypeError",
    "InvalidFieldNameError",
    "PatternCollisionError",
    "UnmarkedMultipleError",
    "UnhandledFailureError",
    "raise_error",
    "raise_result",
]
