"""
modrun logging - structured, invocation-aware logging.

- Structured logging with structlog, rendered to stderr
- Invocation context propagation via contextvars
- Timing spans for the entry point's steps

Usage:
    from modrun.framework.logging import configure_logging, get_logger, log_step, set_context

    configure_logging()
    log = get_logger(__name__)

    set_context(mode="call", object="Ci", function="lint")
    with log_step("call.invoke"):
        run()
"""

from modrun.framework.logging.config import configure_logging
from modrun.framework.logging.context import (
    LogContext,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    set_context,
)
from modrun.framework.logging.timing import StepTimer, log_step

__all__ = [
    "configure_logging",
    "get_logger",
    "set_context",
    "clear_context",
    "get_context",
    "bind_context",
    "LogContext",
    "log_step",
    "StepTimer",
]
