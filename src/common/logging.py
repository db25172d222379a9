"""Central logging configuration."""

from __future__ import annotations

import logging
import os
from typing import Any, MutableMapping, Optional

import structlog

REDACTED = "***"
_SECRET_KEYS = frozenset({"admin_secret", "x-admin-secret", "supabase_key", "aws_secret_access_key"})


def _redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key in _SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


_STRUCTLOG_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    _redact_secrets,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]
_LOGGER_FACTORY = structlog.stdlib.LoggerFactory()


def configure_logging(level: Optional[int] = None) -> None:
    """Configure structlog so every module shares consistent settings.

    Without an explicit level the ``LOG_LEVEL`` env var is honoured.
    """

    resolved = level if level is not None else _level_from_env()
    logging.basicConfig(level=resolved, format="%(message)s")
    structlog.configure(
        processors=_STRUCTLOG_PROCESSORS,
        wrapper_class=structlog.make_filtering_bound_logger(resolved),
        context_class=dict,
        logger_factory=_LOGGER_FACTORY,
    )


def bind_request_context(**values: Any) -> None:
    """Attach values to every log line emitted for the current request."""

    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger bound to the provided name."""

    return structlog.get_logger(name)


def _level_from_env() -> int:
    name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
