"""Guarded Validation Failures

A Failure is a soft, unthrown exception wrapped around an AppError. It must
be acknowledged by the caller: reading `field()` or `message()`, calling
`handle()`, or re-throwing it with `raise_()`. Acknowledgement is checked
explicitly by `ValidationSession.audit()` (or at the end of a `with` block),
which raises UnhandledFailureError naming every failure nobody looked at and
the place it was created.
"""
from __future__ import annotations

import inspect
import os
from typing import NoReturn

from fieldguard.core.errors import AppError, ErrorCode

_PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def construction_site() -> str:
    """`file:line` of the nearest caller outside this package."""
    frame = inspect.currentframe()
    last = "<unknown>"
    try:
        while frame is not None:
            filename = os.path.abspath(frame.f_code.co_filename)
            last = f"{filename}:{frame.f_lineno}"
            if not filename.startswith(_PACKAGE_ROOT):
                return last
            frame = frame.f_back
        return last
    finally:
        del frame


class Failure(Exception):
    """Field validation failure that must be explicitly handled."""

    def __init__(self, error: AppError):
        super().__init__(error.message)
        self.error = error
        self._field = error.field or ""
        self._handled = False

    @property
    def name(self) -> str:
        """Field name, without acknowledging the failure."""
        return self._field

    @property
    def text(self) -> str:
        """Raw message, without acknowledging the failure."""
        return self.error.message

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def origin(self) -> str:
        """Where the failure was constructed."""
        return self.error.context.origin

    def field(self) -> str:
        """Get the field and mark handled."""
        self._handled = True
        return self._field

    def message(self) -> str:
        """Formatted message; marks handled."""
        self._handled = True
        return f'{self.error.message} (field "{self._field}", created at {self.origin})'

    def handle(self) -> None:
        self._handled = True

    def unhandle(self) -> bool:
        """Mark unhandled again, e.g. before passing the failure on."""
        self._handled = False
        return True

    def raise_(self) -> NoReturn:
        """Re-throw as a real exception. The except clause that catches it owns it."""
        self._handled = True
        raise self

    def is_handled(self) -> bool:
        return self._handled

    def to_app_error(self) -> AppError:
        return self.error

    def __repr__(self) -> str:
        state = "handled" if self._handled else "unhandled"
        return f"Failure({self._field!r}, {self.code.name}, {state})"
