"""
Logging setup shared by the API process and the migration scripts.

Configures the root logger once with a single stdout handler.
Modules log through logging.getLogger(__name__).
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every query or connection at INFO
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "httpx",
    "httpcore",
    "multipart",
]


def get_logging_config(level: str = "INFO") -> dict:
    """Build a dictConfig for the given root level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
                "datefmt": LOG_DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
        "loggers": {
            name: {"level": "WARNING"} for name in NOISY_LOGGERS
        },
    }


def setup_logging(level: str = "INFO") -> None:
    """Apply the logging configuration to the root logger."""
    logging.config.dictConfig(get_logging_config(level))
