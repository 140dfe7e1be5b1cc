"""Structlog wiring.

Modules obtain loggers with :func:`get_logger` and pass event data as keyword
arguments (``logger.info("battle_finished", rounds=3)``). The CLI calls
:func:`configure_logging` once; library use without configuration falls back
to structlog's defaults.
"""

import logging
import sys

import structlog
from structlog.stdlib import BoundLogger, LoggerFactory


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route structlog through stdlib logging on stderr.

    ``verbose`` enables debug events (fetch attempts); ``quiet`` keeps only
    warnings and errors.
    """
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
