from __future__ import annotations

import logging

import structlog

from src.common import logging as logging_module
from src.common.logging import (
    REDACTED,
    bind_request_context,
    clear_request_context,
    configure_logging,
)


def test_redact_secrets_masks_known_keys() -> None:
    event = {"event": "x", "admin_secret": "letmein", "key": "models/1-a.glb"}

    redacted = logging_module._redact_secrets(None, "info", event)

    assert redacted["admin_secret"] == REDACTED
    assert redacted["key"] == "models/1-a.glb"


def test_level_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert logging_module._level_from_env() == logging.WARNING

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert logging_module._level_from_env() == logging.INFO


def test_request_context_is_bound_and_cleared() -> None:
    configure_logging(logging.DEBUG)
    clear_request_context()
    bind_request_context(request_id="abc")

    assert structlog.contextvars.get_contextvars() == {"request_id": "abc"}

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}
