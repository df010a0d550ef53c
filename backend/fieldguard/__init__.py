"""fieldguard: declarative field validation with acknowledged failures."""
from fieldguard.core.errors import (
    AppError,
    AppErrorException,
    ErrorCode,
    SchemaError,
    UnhandledFailureError,
)
from fieldguard.validation import (
    ErrorMode,
    Failure,
    FieldRule,
    FilterRegistry,
    Schema,
    TypeRegistry,
    ValidationSession,
)

__version__ = "0.1.0"

__all__ = [
    "ValidationSession",
    "ErrorMode",
    "Failure",
    "FieldRule",
    "Schema",
    "TypeRegistry",
    "FilterRegistry",
    "AppError",
    "AppErrorException",
    "ErrorCode",
    "SchemaError",
    "UnhandledFailureError",
]
