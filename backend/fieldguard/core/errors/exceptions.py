"""Exception wrappers for AppError

Schema authoring faults are never accumulated: they are raised at once as
SchemaError subclasses so a broken schema fails before any input is trusted.
"""
from __future__ import annotations

from typing import NoReturn

from .types import AppError, ErrorCode, Err, Result


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class SchemaError(AppErrorException):
    """The schema itself is broken (not the input)."""


class UnknownTypeError(SchemaError):
    pass


class UnknownFilterError(SchemaError):
    pass


class UnknownOptionError(SchemaError):
    pass


class InvalidRangeFormat(SchemaError):
    pass


class InvalidRangeOrder(SchemaError):
    pass


class RangeTypeError(SchemaError):
    pass


class InvalidFieldNameError(SchemaError):
    pass


class PatternCollisionError(SchemaError):
    pass


class UnmarkedMultipleError(SchemaError):
    pass


class UnhandledFailureError(AppErrorException):
    """Validation failures were dropped without being acknowledged."""


_EXCEPTIONS: dict[ErrorCode, type[AppErrorException]] = {
    ErrorCode.E7000_SCHEMA_GENERIC: SchemaError,
    ErrorCode.E7001_UNKNOWN_TYPE: UnknownTypeError,
    ErrorCode.E7002_UNKNOWN_FILTER: UnknownFilterError,
    ErrorCode.E7003_UNKNOWN_OPTION: UnknownOptionError,
    ErrorCode.E7004_INVALID_RANGE_FORMAT: InvalidRangeFormat,
    ErrorCode.E7005_INVALID_RANGE_ORDER: InvalidRangeOrder,
    ErrorCode.E7006_RANGE_TYPE_MISMATCH: RangeTypeError,
    ErrorCode.E7007_INVALID_FIELD_NAME: InvalidFieldNameError,
    ErrorCode.E7008_PATTERN_COLLISION: PatternCollisionError,
    ErrorCode.E7009_UNMARKED_MULTIPLE: UnmarkedMultipleError,
    ErrorCode.E9003_ASSERTION_FAILED: UnhandledFailureError,
}


def raise_error(error: AppError | Err[AppError]) -> NoReturn:
    """Raise AppError as the exception class registered for its code.

    Usage:
        if type_name not in registry:
            raise_error(unknown_type(type_name))
    """
    if isinstance(error, Err):
        error = error.unwrap_err()
    raise _EXCEPTIONS.get(error.code, AppErrorException)(error)


def raise_result(result: Result) -> None:
    """Raise error if Result is Err, otherwise return."""
    if result.is_err():
        raise_error(result.unwrap_err())
