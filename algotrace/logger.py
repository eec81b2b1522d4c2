"""Logging configuration for algotrace.

Every module logs through a child of the `algotrace` logger. The level comes
from ALGOTRACE_LOGGING_LEVEL (default INFO). Colour is used on a terminal
unless NO_COLOR is set or ALGOTRACE_LOGGING_COLOR says otherwise.
"""

import logging
import os
import sys
from logging.config import dictConfig

_FORMAT = "%(levelname)s %(asctime)s [%(name)s] %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def _should_use_color() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    setting = os.getenv("ALGOTRACE_LOGGING_COLOR", "auto").lower()
    if setting in ("0", "false"):
        return False
    if setting in ("1", "true"):
        return True
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


class ColoredFormatter(logging.Formatter):
    """Colours the level name of each record."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _logging_config() -> dict:
    level = os.getenv("ALGOTRACE_LOGGING_LEVEL", "INFO").upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": _FORMAT, "datefmt": _DATE_FORMAT},
            "colored": {"()": ColoredFormatter, "format": _FORMAT, "datefmt": _DATE_FORMAT},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "colored" if _should_use_color() else "plain",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "algotrace": {"handlers": ["stderr"], "level": level, "propagate": False},
        },
    }


def init_logger(name: str) -> logging.Logger:
    """Logger for a module under the algotrace hierarchy (pass __name__)."""
    return logging.getLogger(name)


def set_logging_level(level: str) -> None:
    """Change the level of every algotrace logger, e.g. for --verbose."""
    logging.getLogger("algotrace").setLevel(level.upper())


dictConfig(_logging_config())
