"""FastAPI / Starlette binding

Builds the input bag from a request, binds validation sessions to the
request, and audits them once the endpoint has returned:

    app = FastAPI()
    register_error_handlers(app)
    app.add_middleware(FailureAuditMiddleware)

    @app.post("/signup")
    async def signup(session: ValidationSession = Depends(validated(SIGNUP))):
        if session.has_errors():
            return {"errors": {f: e.message() for f, e in session.errors.items()}}
        return {"ok": True, "user": session.valid}

An endpoint that leaves a Failure unread gets a 500 E9003 response instead of
its own.
"""
from __future__ import annotations

import time
from typing import Any, Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fieldguard.core.errors.handlers import register_error_handlers, result_to_response
from fieldguard.core.logging import bind_context, clear_context, generate_correlation_id, http_logger
from fieldguard.validation import ErrorMode, Schema, ValidationSession

log = http_logger()

SESSIONS_STATE = "validation_sessions"

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _put(bag: dict[str, Any], key: str, value: str) -> None:
    """Repeated keys and `name[]` keys collect into lists."""
    if key.endswith("[]"):
        key = key[:-2]
        current = bag.get(key)
        if current is None:
            bag[key] = [value]
            return
    elif key not in bag:
        bag[key] = value
        return
    current = bag[key]
    bag[key] = [*current, value] if isinstance(current, list) else [current, value]


async def input_bag(request: Request) -> dict[str, Any]:
    """Query parameters merged with form fields. Uploads are not input values."""
    bag: dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        _put(bag, key, value)

    if request.headers.get("content-type", "").startswith(FORM_TYPES):
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, str):
                _put(bag, key, value)
    return bag


async def bind_session(
    request: Request,
    schema: Schema | Mapping[str, Any],
    mode: ErrorMode | str | None = None,
) -> ValidationSession:
    """Validate the request's input and register the session for auditing."""
    session = ValidationSession(await input_bag(request), mode).validate_all(schema)

    sessions = getattr(request.state, SESSIONS_STATE, None)
    if sessions is None:
        sessions = []
        setattr(request.state, SESSIONS_STATE, sessions)
    sessions.append(session)

    log.debug("session_bound", path=request.url.path, errors=len(session.errors))
    return session


def validated(schema: Schema | Mapping[str, Any], mode: ErrorMode | str | None = None):
    """FastAPI dependency factory: `Depends(validated(schema))`."""

    async def dependency(request: Request) -> ValidationSession:
        return await bind_session(request, schema, mode)

    return dependency


class FailureAuditMiddleware(BaseHTTPMiddleware):
    """Audits every session bound during the request once the endpoint returns."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()
        clear_context()
        bind_context(correlation_id=correlation_id, path=request.url.path)
        setattr(request.state, SESSIONS_STATE, [])

        start = time.perf_counter()
        response = await call_next(request)

        for session in getattr(request.state, SESSIONS_STATE, []):
            result = session.check_handled()
            if result.is_ok():
                continue
            error = result.unwrap_err().with_context(
                request_id=request.headers.get("X-Request-ID"),
                correlation_id=correlation_id,
            )
            log.error(
                "failures_unhandled",
                fields=error.metadata["fields"],
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result_to_response(error)

        return response


__all__ = [
    "input_bag",
    "bind_session",
    "validated",
    "FailureAuditMiddleware",
    "register_error_handlers",
]
