"""
Logging configuration for git-analytics.

Used as a library, the ``git_analytics`` loggers stay silent unless the host
application configures logging, and only warnings and errors reach its
handlers. ``GIT_ANALYTICS_LOG_LEVEL`` raises or lowers that threshold. The
command line installs a rich handler through :func:`setup_logging`.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "git_analytics"
LEVEL_ENV_VAR = "GIT_ANALYTICS_LOG_LEVEL"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handlers this module attached to the git_analytics logger.
_installed: list[logging.Handler] = []


def level_from_env(default: int = logging.WARNING) -> int:
    """Level named by ``GIT_ANALYTICS_LOG_LEVEL`` (a name or a number), else ``default``."""
    raw = os.environ.get(LEVEL_ENV_VAR, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def configure_library_logging() -> logging.Logger:
    """Apply the defaults used when no front end has configured logging.

    Drops handlers installed by :func:`setup_logging` and leaves a single
    ``NullHandler`` so records only go where the host application sends them.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    _remove_handlers(logger)
    _add_handler(logger, logging.NullHandler())
    logger.setLevel(level_from_env())
    return logger


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Send ``git_analytics`` logs to stderr through rich, and optionally a file.

    Safe to call more than once; each call replaces the handlers added by
    the previous one. Other loggers and the root logger are left alone.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append logs to

    Returns:
        The configured ``git_analytics`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = level_from_env()

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    _remove_handlers(logger)
    for handler in handlers:
        _add_handler(logger, handler)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the ``git_analytics`` hierarchy.

    Args:
        name: Module name (e.g., 'git_analytics.history.reader')
              If None, returns the root git_analytics logger
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def _add_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.addHandler(handler)
    _installed.append(handler)


def _remove_handlers(logger: logging.Logger) -> None:
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()


configure_library_logging()
