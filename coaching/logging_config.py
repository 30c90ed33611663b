"""
coaching/logging_config.py
Console logging for Cadence, configured once from app.py.
"""

import logging.config
import sys

from coaching.db import get_secret

# Streamlit executes each page script as __main__.
APP_LOGGERS = ("coaching", "__main__")


def setup_logging() -> None:
    """
    Configure console logging using dictConfig.

    Level comes from LOG_LEVEL (default INFO) for the coaching package and the
    page scripts.  Everything else reaching the root logger is shown from
    WARNING up.  Streamlit's own loggers are left alone.
    """
    level = str(get_secret("LOG_LEVEL", "INFO")).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "level": level,
                "formatter": "plain",
            },
        },
        "loggers": {
            name: {"handlers": ["console"], "level": level, "propagate": False}
            for name in APP_LOGGERS
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    })
