"""
structlog setup for the entry point.

Everything is rendered to stderr: stdout carries the output of the function
being served. Level and format fall back to ``ModrunSettings``
(``MODRUN_LOG_LEVEL``, ``MODRUN_LOG_FORMAT``).

    configure_logging()
    configure_logging(level="DEBUG", format="json", force=True)
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from modrun.core.settings import get_settings
from modrun.framework.logging.context import add_context_processor

_configured = False


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the stdlib root handler.

    Only the first call has an effect unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    numeric_level = getattr(logging, (level or settings.log_level).upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_context_processor,
            structlog.processors.format_exc_info,
            _renderer((format or settings.log_format).lower()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)
    logging.getLogger("modrun").setLevel(numeric_level)
    # one INFO line per request otherwise
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    _configured = True
