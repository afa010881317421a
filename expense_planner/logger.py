"""
Logging setup shared by the app and the library modules.

Library modules only call ``logging.getLogger(__name__)``; the entry point calls
``setup_logger()`` once to pick the format, the level and the stdout handler.
"""

import logging
import sys
from typing import Final
from logging import Logger, StreamHandler


LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str = "expense_planner", level: str = "INFO") -> Logger:
    """
    Configure root logging and return a named logger.

    Parameters
    ----------
    name : str, optional
        Logger name, usually the calling module's ``__name__``.
    level : str, optional
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL" (any case).
        Unknown values fall back to "INFO".

    Returns
    -------
    Logger
        The configured logger.
    """
    log_levels: dict[str, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_levels.get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
        force=True,  # replaces handlers installed by earlier calls (streamlit reruns)
    )

    return logging.getLogger(name)
