"""
Centralized logging configuration using structlog
"""

import base64
import logging
import secrets
import sys
import time
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
account_id_ctx: ContextVar[str | None] = ContextVar("account_id", default=None)

REDACTED = "[REDACTED]"

# Matched as substrings of lower-cased keys
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "token",
        "secret",
        "api_key",
        "authorization",
        "jwt",
        "cookie",
        "credentials",
        "signature",
        "photo",
    }
)


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def redact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``values`` with every sensitive entry replaced by a marker."""
    return {key: REDACTED if is_sensitive_key(key) else value for key, value in values.items()}


class RequestContextFilter:
    """Stamp events with the current request id and authenticated account."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict["request_id"] = request_id

        account_id = account_id_ctx.get()
        if account_id:
            event_dict["account_id"] = account_id

        return event_dict


def redact_sensitive_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor that keeps passwords, tokens and photo payloads out of log output."""
    _ = logger, method_name
    return {
        key: REDACTED if key != "event" and is_sensitive_key(key) else value
        for key, value in event_dict.items()
    }


def _resolve_level(debug: bool, log_level: str | None) -> int:
    if log_level:
        level = logging.getLevelName(log_level.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if debug else logging.INFO


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        debug: Render colored console output instead of JSON lines.
        log_level: Level name such as ``"warning"``; falls back to DEBUG in
            debug mode and INFO otherwise.
    """
    logging.basicConfig(
        level=_resolve_level(debug, log_level),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    renderer = structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            RequestContextFilter(),
            redact_sensitive_fields,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Return a 14-character urlsafe id: 8 bytes of microsecond clock, 2 random bytes."""
    stamp = int(time.time() * 1_000_000).to_bytes(8, byteorder="big")
    return base64.urlsafe_b64encode(stamp + secrets.token_bytes(2)).decode("ascii").rstrip("=")


def set_request_context(request_id: str | None = None, account_id: str | None = None) -> None:
    """Bind the request id (generated when omitted) and, if known, the caller's account."""
    request_id_ctx.set(request_id or generate_request_id())
    if account_id is not None:
        account_id_ctx.set(account_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    account_id_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def get_account_id() -> str | None:
    return account_id_ctx.get()
