"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import Any

import structlog

from incident_alert.core.config import get_settings

# incident.io takes the API token as a query parameter.
_TOKEN_QUERY = re.compile(r"([?&]token=)[^&\s'\"]+")


def redact_url_tokens(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace ``token=...`` query values in string fields with ``***``."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "token=" in value:
            event_dict[key] = _TOKEN_QUERY.sub(r"\g<1>***", value)
    return event_dict


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog with JSON or console renderer.

    Output goes to stderr; stdout is reserved for workflow commands.
    ``RUNNER_DEBUG=1`` (set by GitHub when step debugging is enabled)
    forces DEBUG unless *level* is given explicitly.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer format override ("json" or "console"). Uses config if None.
    """
    settings = get_settings()
    if level is None and os.environ.get("RUNNER_DEBUG") == "1":
        level = "DEBUG"
    log_level = getattr(logging, (level or settings.logging.level).upper(), logging.INFO)
    log_format = fmt or settings.logging.format

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_url_tokens,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
