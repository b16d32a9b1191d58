"""Structured logging for harness runs.

Log lines describe requests sent to the adapter, the answers it gave and the
scenario step that caused them. They go to stderr so ``efs-harness run --json``
keeps stdout parseable.

Environment Variables:
    EFS_LOG_FORMAT: "json", "console" or "auto" (console on a terminal, JSON otherwise)
    EFS_LOG_LEVEL: Minimum level (DEBUG, INFO, WARNING, ERROR)
    EFS_SERVICE_NAME: Value of the ``service`` field on every line, e.g. the adapter name

Example:
    >>> from efs_harness.observability.logging import configure_logging, get_logger
    >>> configure_logging(log_format="json", log_level="DEBUG", force=True)
    >>> get_logger(__name__).info("scenario.booked", booking_id="b-1", state="BOOKED")
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "auto"
DEFAULT_SERVICE_NAME = "efs-adapter-harness"

ENV_LOG_FORMAT = "EFS_LOG_FORMAT"
ENV_LOG_LEVEL = "EFS_LOG_LEVEL"
ENV_SERVICE_NAME = "EFS_SERVICE_NAME"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Matched case-insensitively against field names, e.g. "x-credentials"
_SENSITIVE_KEY_PATTERNS = frozenset({"password", "token", "secret", "credentials", "authorization"})

# Per-request INFO lines of the HTTP stack duplicate client.request/client.response
_HTTP_LOGGERS = ("httpx", "httpcore")

_logging_configured = False


def _is_sensitive_key(key: str) -> bool:
    lower = key.lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with credential-like values redacted.

    Nested dicts, and dicts inside lists, are sanitized as well.

    Example:
        >>> sanitize_for_logging({"x-credentials": "abc", "state": "BOOKED"})
        {'x-credentials': '***REDACTED***', 'state': 'BOOKED'}
    """
    if not data:
        return {}
    result: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            result[key] = REDACTED_PLACEHOLDER
        elif isinstance(value, dict):
            result[key] = sanitize_for_logging(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def redact_sensitive_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor applying sanitize_for_logging to every event."""
    return sanitize_for_logging(event_dict)


def _resolve_format(log_format: str) -> str:
    if log_format == "auto":
        return "console" if sys.stderr.isatty() else "json"
    return log_format


def _build_renderer(log_format: str) -> Processor:
    if _resolve_format(log_format) == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_sensitive_fields,
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Route structlog and stdlib logging to one stderr handler.

    Args:
        log_format: "json", "console" or "auto"; defaults to EFS_LOG_FORMAT or "auto"
        log_level: Minimum level; defaults to EFS_LOG_LEVEL or "INFO"
        service_name: Bound as ``service``; defaults to EFS_SERVICE_NAME
        force: Reconfigure even if logging was configured before
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    service_name = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    shared_processors = _shared_processors()
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _build_renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level))

    http_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    structlog.contextvars.bind_contextvars(service=service_name)

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger, configuring logging with defaults on first use."""
    if not _logging_configured:
        configure_logging()

    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every following log line of this context.

    Example:
        >>> bind_context(scenario="book_start_abort_try_all_states")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
