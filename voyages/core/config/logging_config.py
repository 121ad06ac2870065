import logging.config
import os

from voyages.core.config.settings import get_settings

def setup_logging():
    """Configure logging settings for the application"""
    settings = get_settings()
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    def rotating_file(name, **extra):
        return {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": os.path.join(settings.LOG_DIR, name),
            "maxBytes": settings.LOG_FILE_MAX_BYTES,
            "backupCount": settings.LOG_FILE_BACKUP_COUNT,
            **extra,
        }

    LOGGING_CONFIG = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "file": rotating_file("app.log"),
            "error_file": rotating_file("error.log", level="ERROR"),
        },
        "loggers": {
            "": {  # Root logger
                "handlers": ["console", "file"],
                "level": settings.LOG_LEVEL,
            },
            "voyages": {
                "handlers": ["console", "file", "error_file"],
                "level": settings.LOG_LEVEL,
                "propagate": False,
            },
            # statements are echoed at INFO when LOG_SQL is on
            "sqlalchemy.engine": {
                "level": "INFO" if settings.LOG_SQL else "WARNING",
            },
        },
    }

    logging.config.dictConfig(LOGGING_CONFIG)
    return logging.getLogger("voyages")
