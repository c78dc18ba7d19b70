"""Console logging setup for the command line entrypoint.

Library modules only create loggers; handlers are installed here and nowhere
else. Output goes to stderr so the JSON summary on stdout stays parseable.
"""

from __future__ import annotations

import logging.config


def configure_logging(level: str = "WARNING") -> None:
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "shiftboard": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(logging_config)
