"""structlog configuration for the twiauth CLI and library users."""

import logging
import sys
from typing import Literal

import structlog


LogFormat = Literal["console", "json"]

_configured = False


def setup_logging(
    level: str = "INFO",
    log_format: LogFormat = "console",
    *,
    force: bool = False,
) -> None:
    """Configure structlog once.

    Later calls are ignored unless ``force`` is set.

    Args:
        level: Minimum level name, e.g. ``"DEBUG"``
        log_format: ``console`` for human-readable output, ``json`` for one
            JSON object per line
        force: Reconfigure even if already configured

    Raises:
        ValueError: If the level name is unknown
    """
    global _configured
    if _configured and not force:
        return

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    _configured = True


def reset_logging() -> None:
    """Restore structlog defaults (useful for testing)."""
    global _configured
    structlog.reset_defaults()
    _configured = False
