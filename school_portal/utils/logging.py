# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""structlog setup for the portal.

Services log through plain ``logging.getLogger(__name__)``; those records
pass through the same processor chain as structlog's own loggers, so request
context bound by the middleware shows up on every line. Output is JSON
outside development and a readable console format inside it.

Example:
    >>> setup_logging(get_settings())
    >>> bind_context(request_id="4f1c")
    >>> logging.getLogger("school_portal.domains.review").info("Created review")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from school_portal.core.config.settings import Settings

_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "sqlalchemy", "asyncio")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(settings: "Settings") -> None:
    """Install the portal's log pipeline on structlog and the stdlib root logger.

    Args:
        settings: Supplies log_level and whether to render for a console.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    pre_chain = _pre_chain()

    if settings.is_development or settings.debug:
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.processors.format_exc_info, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("school_portal").setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger for ad-hoc key/value logging."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Attach key/value pairs to every log line in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with bind_context.

    The request middleware calls this on entry and exit so one request's
    fields never appear on another's lines.
    """
    structlog.contextvars.clear_contextvars()
