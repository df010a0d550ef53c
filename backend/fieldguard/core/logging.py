"""Structured Logging for fieldguard

Events are snake_case names with keyword context:

    log.debug("field_invalid", field="age", code="E2003_OUT_OF_RANGE")

Input values never reach the log: the bag being validated is untrusted and
routinely carries credentials. `_omit_input_values` blanks value-carrying
keys and `_censor_sensitive_keys` redacts credential-named keys at any depth.

`configure_logging()` attaches a handler to the `fieldguard` logger only, so
an embedding application keeps control of the root logger.
"""
import logging
import sys
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

from fieldguard.core.config import get_settings

LOGGER_NAMESPACE = "fieldguard"

SENSITIVE_KEYS = frozenset({"password", "password_confirm", "token", "secret", "authorization", "cookie"})

# Keys that would carry raw field input
INPUT_KEYS = frozenset({"value", "values", "raw", "bag"})

_MAX_DEPTH = 5


def _redact(obj, depth: int = 0):
    if depth > _MAX_DEPTH:
        return obj
    if isinstance(obj, dict):
        return {
            key: "[REDACTED]" if str(key).lower() in SENSITIVE_KEYS else _redact(item, depth + 1)
            for key, item in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def _censor_sensitive_keys(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that redacts credential-named keys."""
    return _redact(event_dict)


def _omit_input_values(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that drops raw field input from events."""
    for key in event_dict.keys() & INPUT_KEYS:
        event_dict[key] = "[omitted]"
    return event_dict


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", LOGGER_NAMESPACE)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_service_info,
        _omit_input_values,
        _censor_sensitive_keys,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog and the `fieldguard` stdlib logger.

    Args:
        level: Log level name. Defaults to settings.LOG_LEVEL.
        json_logs: JSON lines when True, colored console output when False.
            Defaults to settings.LOG_JSON.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs

    shared_processors = get_shared_processors()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.handlers = [handler]
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False


def get_logger(name: str = LOGGER_NAMESPACE) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def generate_correlation_id() -> str:
    """Short id tying one request's log lines together."""
    return str(uuid4())[:8]


class LoggerRegistry:
    """One logger per engine component, named `fieldguard.<component>`."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, component: str) -> structlog.stdlib.BoundLogger:
        if component not in cls._loggers:
            cls._loggers[component] = get_logger(f"{LOGGER_NAMESPACE}.{component}")
        return cls._loggers[component]


def session_logger() -> structlog.stdlib.BoundLogger:
    """Validation passes, field outcomes, audits."""
    return LoggerRegistry.get("session")


def schema_logger() -> structlog.stdlib.BoundLogger:
    """Schema compilation."""
    return LoggerRegistry.get("schema")


def http_logger() -> structlog.stdlib.BoundLogger:
    """Request adapter and error responses."""
    return LoggerRegistry.get("http")
