import logging
import logging.config

from lmstudio_bridge.config import get_settings


def setup_logging():
    """
    Configure the bridge log format
    DEBUG_LMSTUDIO switches the package logger to DEBUG so payload dumps become visible.
    """
    settings = get_settings()
    log_level = "DEBUG" if settings.DEBUG_LMSTUDIO else "INFO"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "httpx": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "lmstudio_bridge": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)


def is_debug_enabled() -> bool:
    """Whether intermediate payloads should be dumped"""
    return get_settings().DEBUG_LMSTUDIO
