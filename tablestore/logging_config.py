"""
Logging setup for tablestore.

structlog events are handed to the stdlib logging tree, so a library
user who configures nothing only sees warnings (through logging's
last-resort handler, rendered as key=value text). Applications such as
the CLI call configure_logging() once to pick a level and an output
stream; records are then rendered by a ProcessorFormatter.
"""

import logging
import sys
from typing import Optional

import structlog

_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _renderer():
    return structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "logger", "event"])


def _configure_structlog(final_processor) -> None:
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *_SHARED_PROCESSORS, final_processor],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # the CLI and tests reconfigure at runtime
        cache_logger_on_first_use=False,
    )


def configure_logging(level: str = "WARNING", stream=None) -> None:
    """
    Send tablestore log events to a console stream.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream for the console handler (default: stderr)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(),
        foreign_pre_chain=_SHARED_PROCESSORS,
    ))

    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    _configure_structlog(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)


def reset_logging() -> None:
    """Go back to the unconfigured default (key=value text via stdlib)"""
    _configure_structlog(_renderer())


def get_logger(name: Optional[str] = None):
    """Return a structlog logger bound to `name`"""
    return structlog.get_logger(name)


reset_logging()
