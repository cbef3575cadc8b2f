# server/logging_config.py

import logging.config
from typing import Any, Dict


APP_LOGGERS = ("main", "config", "database", "api", "core")


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Logging configuration shared by the app and uvicorn loggers."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            **{name: {"handlers": ["default"], "level": level, "propagate": False} for name in APP_LOGGERS},
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO"):
    logging.config.dictConfig(get_logging_config(level))
