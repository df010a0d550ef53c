"""Shared fixtures for fieldguard tests."""
import pytest

from fieldguard.core.errors import AppError, ErrorCode, ErrorContext
from fieldguard.validation import (
    ConstraintTester,
    FieldResolver,
    FilterRegistry,
    TypeRegistry,
    ValidationSession,
)


@pytest.fixture
def types():
    return TypeRegistry()


@pytest.fixture
def filters():
    return FilterRegistry()


@pytest.fixture
def tester():
    return ConstraintTester()


@pytest.fixture
def resolver(types, filters):
    return FieldResolver(types, filters)


@pytest.fixture
def make_session():
    """Session factory that never audits on its own."""

    def make(fields=None, mode="failures", **kwargs):
        kwargs.setdefault("audit_on_exit", False)
        return ValidationSession(fields, mode, **kwargs)

    return make


@pytest.fixture
def app_error():
    return AppError(
        code=ErrorCode.E2003_OUT_OF_RANGE,
        message="Adults only",
        context=ErrorContext(origin="signup.py:12"),
        metadata={"field": "age"},
    )
