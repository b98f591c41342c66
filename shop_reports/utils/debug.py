"""Debug logging helpers for the shop_reports package."""

from __future__ import annotations

import logging
import os

from rich.logging import RichHandler

LOGGER_NAME = "shop_reports"
LOG_LEVEL_ENV = "SHOP_REPORTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger(LOGGER_NAME)


def log_exception(exc: BaseException) -> None:
    """Record a handled exception on the debug channel.

    Logging failures are handled by the logging module itself and never
    reach the caller.
    """
    logger.debug(
        "%s: %s",
        type(exc).__name__,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
    )


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a rich console handler to the package logger.

    ``level`` falls back to ``SHOP_REPORTS_LOG_LEVEL`` and then WARNING.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, rich_tracebacks=True))
    logger.setLevel(level_name)
    return logger
