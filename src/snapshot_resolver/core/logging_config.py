"""Structured logging configuration using structlog.

Call ``configure_logging()`` once at startup (the CLI script does this).
Library modules use the stdlib logging API::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("wayback: resolved %s", url)

Any values bound with ``structlog.contextvars.bind_contextvars`` (the
resolver binds ``target_url`` for the duration of a lookup) are merged into
every record emitted while they are bound.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib logging through it.

    Outside ``DEBUG`` the output is newline-delimited JSON. At ``DEBUG`` it
    uses structlog's ``ConsoleRenderer`` for human-readable coloured output.

    Standard fields added to every record: ``timestamp`` (ISO 8601),
    ``level``, ``logger`` and ``event``.

    Records go to stderr so that a command-line caller can keep stdout for
    its result (``scripts/resolve_snapshot.py`` prints only the resolved
    snapshot there).

    Safe to call more than once; previously attached root handlers are
    replaced.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``,
            ``"ERROR"``, ``"CRITICAL"``. Case-insensitive.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    if not is_development:
        for noisy_logger in ("httpx", "httpcore"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
