"""Error Taxonomy and Result Types

Two kinds of error flow through fieldguard:

- Field failures (E2xxx, E5xxx) describe bad input. They are accumulated by
  a ValidationSession and never raised while a pass is running.
- Schema faults (E7xxx) describe a broken schema. They are raised at once.

Both are AppError values; builders wrap them in Err so call sites can choose
between returning a Result and raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Numbered error codes; the thousands digit is the category.

    E2xxx: Field validation failures
    E5xxx: Cross-field (requires) failures
    E7xxx: Schema authoring faults
    E9xxx: Internal errors, including unacknowledged failures
    """
    # Field validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005

    # Cross-field (E5xxx)
    E5020_DEPENDENCY_ERROR = 5020

    # Schema authoring (E7xxx)
    E7000_SCHEMA_GENERIC = 7000
    E7001_UNKNOWN_TYPE = 7001
    E7002_UNKNOWN_FILTER = 7002
    E7003_UNKNOWN_OPTION = 7003
    E7004_INVALID_RANGE_FORMAT = 7004
    E7005_INVALID_RANGE_ORDER = 7005
    E7006_RANGE_TYPE_MISMATCH = 7006
    E7007_INVALID_FIELD_NAME = 7007
    E7008_PATTERN_COLLISION = 7008
    E7009_UNMARKED_MULTIPLE = 7009

    # Internal (E9xxx)
    E9003_ASSERTION_FAILED = 9003

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.value // 1000, "internal")

    @property
    def http_status(self) -> int:
        """Bad input is the client's fault; a broken schema or an unread failure is ours."""
        return _STATUSES.get(self.category, 500)

    @property
    def is_schema_fault(self) -> bool:
        return self.category == "schema"


_CATEGORIES = {2: "validation", 5: "dependency", 7: "schema", 9: "internal"}
_STATUSES = {"validation": 400, "dependency": 409}


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Tracing context. `origin` is where the error was constructed."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error value: code, message, context and structured metadata.

    Field errors carry the field name as `metadata["field"]`.
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    @property
    def error_id(self) -> str:
        return f"{self.code.name}:{self.context.correlation_id}"

    @property
    def field(self) -> str | None:
        return self.metadata.get("field")

    def with_context(self, **kwargs: Any) -> AppError:
        """Copy with updated context. A None correlation id keeps the current one."""
        context = replace(
            self.context,
            correlation_id=kwargs.get("correlation_id") or self.context.correlation_id,
            origin=kwargs.get("origin", self.context.origin),
            request_id=kwargs.get("request_id", self.context.request_id),
        )
        return replace(self, context=context)

    def with_metadata(self, **kwargs: Any) -> AppError:
        return replace(self, metadata={**self.metadata, **kwargs})

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "field": self.field,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]:
        return f(self.value)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def and_then(self, f: Callable[[Any], Any]) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]


def ensure(condition: bool, error: AppError) -> Result[None, AppError]:
    """Ok(None) when the condition holds, Err(error) otherwise."""
    return Ok(None) if condition else Err(error)
