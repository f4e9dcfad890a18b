import logging
import logging.config
from pathlib import Path

from exam_portal.core.config import settings

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"]
    },
    "loggers": {
        "exam_portal": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        },
        "uvicorn.access": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False
        }
    }
}

def _file_handler(filename: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": 10485760,
        "backupCount": 5
    }

def build_logging_config(level: str = None, log_to_file: bool = None) -> dict:
    level = (level or settings.LOG_LEVEL).upper()
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file

    config = {
        **LOGGING_CONFIG,
        "handlers": dict(LOGGING_CONFIG["handlers"]),
        "root": dict(LOGGING_CONFIG["root"], level=level),
        "loggers": {name: dict(cfg) for name, cfg in LOGGING_CONFIG["loggers"].items()},
    }
    config["loggers"]["exam_portal"]["level"] = level

    if log_to_file:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = _file_handler("app.log", "INFO")
        config["handlers"]["error_file"] = _file_handler("error.log", "ERROR")
        config["root"]["handlers"] = ["console", "file", "error_file"]
        config["loggers"]["exam_portal"]["handlers"] = ["console", "file", "error_file"]

    return config

def configure_logging(level: str = None, log_to_file: bool = None):
    logging.config.dictConfig(build_logging_config(level=level, log_to_file=log_to_file))
