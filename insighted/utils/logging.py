# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Modules log through ``logging.getLogger(__name__)`` with %-style messages.
A single stdout handler renders every record through structlog's
``ProcessorFormatter``: JSON in staging and production, colored console
output in development.

Each line carries the profile context of the work that produced it. The
request middleware binds ``method`` and ``path``, ``require_submitter``
binds ``submitter``, and the services wrap their writes in
``profile_log_context`` to bind ``school_id`` and ``action``. The same
keys may also be passed per call through ``extra``.

Example:
    >>> from insighted.utils.logging import setup_logging, profile_log_context
    >>> setup_logging(get_settings())
    >>> with profile_log_context(school_id="100001", action="Enrolment Update"):
    ...     logger.info("Dependent record amended")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from insighted.core.config.settings import Settings

HANDLER_NAME = "insighted"

# Context keys carried on profile log lines.
PROFILE_CONTEXT_KEYS = ("submitter", "school_id", "action", "method", "path")

NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "sqlalchemy", "aiosqlite", "asyncio")


def drop_unset_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Remove profile context keys bound to None or an empty string."""
    for key in PROFILE_CONTEXT_KEYS:
        if key in event_dict and event_dict[key] in (None, ""):
            del event_dict[key]
    return event_dict


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Safe to call more than once: the handler installed by a previous call
    is replaced, never duplicated.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.ExtraAdder(allow=PROFILE_CONTEXT_KEYS),
        drop_unset_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("insighted").setLevel(log_level)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Used by the API to attach the request and submitter to every log line
    produced while a request is handled.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def profile_log_context(**kwargs: object) -> Iterator[None]:
    """Bind profile identifiers for the duration of a block.

    Keys bound before the block are restored when it exits, so a service
    call never leaks its ``school_id`` into later log lines of the request.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
