"""structlog setup for the ALKS client.

The library only emits diagnostics: a warning when deprecated
userid/password credentials are used, and debug events around each
request. Those go to the error stream. Applications that configure
structlog themselves get the library's events through their own pipeline.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def _processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.EventRenamer("msg"),
        structlog.processors.format_exc_info,
        structlog.processors.LogfmtRenderer(
            key_order=("timestamp", "level", "msg"),
        ),
    ]


def get_logger(name: str) -> Any:
    """Return the logger the library writes its diagnostics to.

    If the application has configured structlog, this is a regular
    ``structlog.get_logger(name)``. Otherwise warnings and above are
    printed as logfmt to stderr, instead of structlog's default of every
    level on stdout.
    """
    if structlog.is_configured():
        return structlog.get_logger(name)
    return structlog.wrap_logger(
        structlog.PrintLogger(sys.stderr),
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        context_class=dict,
    )


def configure_logging(
    log_level_name: str = "WARNING",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for logfmt output on the error stream.

    Args:
        log_level_name: Minimum level; "DEBUG" adds per-request events.
            Unknown names fall back to WARNING.
        stream: Where to write; defaults to ``sys.stderr`` at call time.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.WARNING)
    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=True,
    )
