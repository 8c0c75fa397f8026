"""Structured logging for humans.inc.

structlog renders colored console lines in development and one JSON object
per line elsewhere. Request-scoped values (correlation ID, caller ID) are
bound through contextvars by the HTTP layer and merged into every entry.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from humans.core.config import Settings, get_settings

# Keys whose values never reach the log output
REDACTED_KEYS = frozenset(
    {"password", "password_hash", "token", "refresh_token", "authorization", "content", "html"}
)
REDACTED = "[redacted]"


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Give entries logged outside a request their own correlation ID."""
    event_dict.setdefault("correlation_id", f"cid_{uuid.uuid4().hex[:12]}")
    return event_dict


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # structlog.stdlib.add_logger_name needs a stdlib logger; PrintLogger has no name
    event_dict["logger"] = getattr(logger, "name", None) or "humans"
    return event_dict


def redact_sensitive_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace credentials and block payloads with a placeholder.

    Mutations are logged with IDs only, so these keys should not appear;
    when they do, their values are dropped.
    """
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _renderer(settings: Settings) -> Processor:
    if settings.is_development or settings.log_format == "console":
        return structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )
    return structlog.processors.JSONRenderer()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library loggers.

    Args:
        settings: Settings to read the level and format from. Loaded from
            the environment when omitted.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    renderer = _renderer(settings)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            add_correlation_id,
            redact_sensitive_fields,
            rename_message_field,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not settings.is_development,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, named ``humans`` unless given a name."""
    return structlog.get_logger(name or "humans")


def bind_correlation_id(correlation_id: str) -> None:
    """Bind the request's correlation ID to the logging context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def bind_user_id(user_id: str) -> None:
    """Bind the authenticated caller's ID to the logging context."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_context() -> None:
    """Drop request-scoped logging context at the end of a request."""
    structlog.contextvars.clear_contextvars()
