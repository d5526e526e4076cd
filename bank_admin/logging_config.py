"""
Logging configuration for the administration API.

Creates a rotating file logger under LOG_DIR and mirrors
warnings to the console.
"""

import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from bank_admin.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

SERVICE_LOGGER = "bank_admin"


def _setup_file_logger(name: str, log_file: Path, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Avoid duplicate handlers if setup_logging is called multiple times
    logger.handlers = []

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger


def setup_logging() -> None:
    """
    Configure root + service loggers.

    Every module logger lives under the "bank_admin" namespace,
    so the handlers attached here cover the whole application.
    """
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    _setup_file_logger(SERVICE_LOGGER, log_dir / "bank_admin.log", level)

    # SQL echo is only useful while debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )
