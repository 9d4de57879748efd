"""Module in charge of logger initialization and settings."""
import logging.config
from typing import Optional

from autoderef.util.options import Options

DEFAULT_FORMAT = "[%(filename)s:%(lineno)s %(funcName)s()] %(levelname)s - %(message)s"
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": True,
    "formatters": {
        "standard": {"format": DEFAULT_FORMAT},
    },
    "handlers": {
        "default": {
            "level": "DEBUG",
            "formatter": "standard",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",  # keep stdout free for the findings
        },
    },
    "loggers": {
        "": {"handlers": ["default"], "level": "WARNING", "propagate": False},  # root logger
    },
}


def configure_logging(level: Optional[str] = None):
    if level is not None:
        log_level = level
    else:
        log_level = Options.load_default_options().getstring("logging.log_level", fallback="WARNING")
    LOGGING_CONFIG["loggers"][""]["level"] = log_level
    logging.config.dictConfig(LOGGING_CONFIG)
