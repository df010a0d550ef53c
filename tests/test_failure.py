"""
Tests for the acknowledged failure protocol.
"""

import os

import pytest

from fieldguard.core.errors import ErrorCode
from fieldguard.validation import Failure, construction_site


class TestFailure:
    """Reading a failure's field or message acknowledges it."""

    def test_starts_unhandled(self, app_error):
        failure = Failure(app_error)
        assert not failure.is_handled()

    def test_inspection_does_not_acknowledge(self, app_error):
        failure = Failure(app_error)
        assert failure.name == "age"
        assert failure.text == "Adults only"
        assert failure.code == ErrorCode.E2003_OUT_OF_RANGE
        assert failure.origin == "signup.py:12"
        assert not failure.is_handled()

    def test_field_acknowledges(self, app_error):
        failure = Failure(app_error)
        assert failure.field() == "age"
        assert failure.is_handled()

    def test_message_is_stable(self, app_error):
        failure = Failure(app_error)
        first = failure.message()
        assert first == 'Adults only (field "age", created at signup.py:12)'
        assert failure.message() == first
        assert failure.is_handled()

    def test_handle_and_unhandle(self, app_error):
        failure = Failure(app_error)
        failure.handle()
        assert failure.is_handled()
        assert failure.unhandle() is True
        assert not failure.is_handled()

    def test_raise_rethrows_and_acknowledges(self, app_error):
        failure = Failure(app_error)
        with pytest.raises(Failure) as exc:
            failure.raise_()
        assert exc.value is failure
        assert failure.is_handled()

    def test_is_exception_carrying_app_error(self, app_error):
        failure = Failure(app_error)
        assert isinstance(failure, Exception)
        assert failure.to_app_error() is app_error
        assert "unhandled" in repr(failure)


class TestConstructionSite:
    def test_points_at_caller(self):
        site = construction_site()
        path, _, line = site.rpartition(":")
        assert path == os.path.abspath(__file__)
        assert line.isdigit()
