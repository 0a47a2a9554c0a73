"""
Structured logging for recaptcha-gate.

Sets up structlog with:
- JSON formatting for production, pretty console for development
- IP hashing for privacy in production
- Redaction of credentials (private key, proxy auth) from every event

setup_logging() is called once by create_app(); modules only ever call
get_logger(__name__).
"""

from __future__ import annotations

import hashlib
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

if TYPE_CHECKING:
    from config import LoggingSettings

_state = {"production": False}

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "secret",
    "key",
    "auth",
    "privatekey",
    "private_key",
    "authorization",
    "proxy-authorization",
}

_REDACTED_FRAGMENTS = ("password", "token", "key", "secret", "auth")
_PRESERVED = {"level", "event", "timestamp", "logger"}


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("recaptcha_verified", remote_ip=hash_ip("1.2.3.4"))
    """
    return structlog.get_logger(name)


def hash_ip(ip_address: Optional[str]) -> Optional[str]:
    """
    Hash an IP address for privacy in production.

    In production: SHA-256 hash (first 16 chars).
    In development: the original IP for easier debugging.
    """
    if ip_address is None:
        return None
    if _state["production"] and ip_address:
        return hashlib.sha256(ip_address.encode()).hexdigest()[:16]
    return ip_address


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _PRESERVED:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            fragment in lowered for fragment in _REDACTED_FRAGMENTS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog processors.

    "json": one JSON object per line.
    anything else: coloured console output.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_logging(
    settings: Optional["LoggingSettings"] = None, *, production: bool = False
) -> None:
    """
    Initialize logging for the application.

    Should be called early in application startup (create_app does it).
    """
    log_level = settings.log_level if settings is not None else "INFO"
    log_format = settings.log_format if settings is not None else "console"
    _state["production"] = production

    configure_stdlib_logging(log_level)
    configure_structlog(log_format)

    get_logger(__name__).info(
        "logging_initialized",
        log_level=log_level,
        log_format=log_format,
        production=production,
    )


__all__ = [
    "get_logger",
    "hash_ip",
    "configure_structlog",
    "setup_logging",
]
