"""FastAPI Exception Handlers

A SchemaError escaping a route means the application shipped a broken
schema; an UnhandledFailureError means a route dropped input failures on
the floor. Both are server faults and render as the AppError JSON body.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fieldguard.core.logging import http_logger

from .exceptions import AppErrorException
from .types import AppError

log = http_logger()


def result_to_response(error: AppError) -> JSONResponse:
    """Render an AppError with its code's HTTP status."""
    status_code = error.code.http_status
    event = "schema_fault" if error.code.is_schema_fault else "error_response"

    (log.error if status_code >= 500 else log.warning)(
        event,
        code=error.code.name,
        field=error.field,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
    )
    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    # Callers may pin the ids; otherwise the error keeps its own
    error = exc.error.with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID"),
    )
    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Install `app_error_handler` for every AppErrorException subclass."""
    app.add_exception_handler(AppErrorException, app_error_handler)
