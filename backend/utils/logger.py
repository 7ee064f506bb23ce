# backend/utils/logger.py
import logging

APP_LOGGER_NAME = "catalog"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger(APP_LOGGER_NAME).setLevel(level.upper())


def get_logger() -> logging.Logger:
    """Request-scoped logging capability; tests override this dependency with a silent logger."""
    return logging.getLogger(APP_LOGGER_NAME)
