import logging
import logging.config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(module)s:%(lineno)d - %(message)s"


def build_log_config(level: str = "INFO") -> dict:
    """dictConfig for the console: uvicorn's loggers plus the "app" logger at ``level``."""
    console = {"handlers": ["console"], "level": "INFO"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "loggers": {
            "uvicorn": dict(console),
            "uvicorn.error": dict(console),
            "uvicorn.access": dict(console),
            "app": {"handlers": ["console"], "level": level.upper(), "propagate": False},
        },
        "root": dict(console),
    }


def setup_logging(level: str = "INFO"):
    logging.config.dictConfig(build_log_config(level))
