"""Rich-backed logging setup for the sinelab package logger."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "sinelab"


def configure_logging(level: str | int = "INFO", console: Console | None = None) -> logging.Logger:
    """Attach a single :class:`RichHandler` to the package logger.

    Calling it again updates the level. Passing a different ``console``
    replaces the handler so records follow the caller's console.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level if isinstance(level, int) else level.upper())
    installed = [handler for handler in logger.handlers if isinstance(handler, RichHandler)]
    if console is not None:
        for handler in [h for h in installed if h.console is not console]:
            logger.removeHandler(handler)
            installed.remove(handler)
    if not installed:
        handler = RichHandler(
            console=console,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
