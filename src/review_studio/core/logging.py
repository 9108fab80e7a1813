"""Structured logging configuration for Review Studio.

structlog is configured once per process. Streamlit re-executes the app
script on every interaction, so configure_logging() is idempotent unless
forced. API keys never reach a log line: any event field whose name
looks like a credential is masked before rendering.

Example:
    >>> from review_studio.core.logging import get_logger, log_context
    >>> logger = get_logger(__name__)
    >>> with log_context(action="summary"):
    ...     logger.info("Invocation settled", provider="gemini", duration=1.2)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


SECRET_FIELD_MARKERS = ("api_key", "secret", "password")
REDACTED = "***"

_SDK_LOGGERS = ("httpx", "httpcore", "google_genai", "openai", "asyncio")

_configured = False


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict["app"] = "review_studio"
    return event_dict


def redact_secrets(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask fields that carry credentials.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with credential values replaced.
    """
    for key in event_dict:
        lowered = key.lower()
        if any(marker in lowered for marker in SECRET_FIELD_MARKERS) and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
    force: bool = False,
) -> bool:
    """Configure application-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, render JSON lines instead of console output.
        log_file: Optional path to a log file for the SDK loggers.
        force: Reconfigure even if logging was already set up.

    Returns:
        True if logging was (re)configured by this call.
    """
    global _configured

    if _configured and not force:
        return False

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Processor
    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # SDK clients log through the standard library
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=log_level,
        stream=sys.stdout,
        force=True,
    )
    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        logging.getLogger().addHandler(file_handler)

    _configured = True
    return True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind fields to every log entry emitted inside the block.

    Bindings are restored on exit, including on exceptions. Tasks created
    inside the block (e.g. by asyncio.run) inherit them.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "redact_secrets",
]
