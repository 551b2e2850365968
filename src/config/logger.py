import os
import logging
from logging.handlers import RotatingFileHandler

from src.config.settings import get_settings

MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logger(
    name: str = None,
    log_file_name: str = None,
) -> logging.Logger:
    """
    Creates and returns a logger with a console handler and a rotating file handler.

    The file handler always records DEBUG; the console level comes from LOG_LEVEL.
    Loggers are cached by name, so repeated imports do not stack handlers.

    Args:
        name (str): Logger name (usually the component name).
        log_file_name (str): File name inside LOG_DIR.

    Returns:
        logging.Logger: Configured logger instance.
    """
    settings = get_settings()

    if not log_file_name:
        log_file_name = f"{(name or 'pipeline').lower()}.log"

    log_dir_path = os.path.join(os.getcwd(), settings.log_dir)
    os.makedirs(log_dir_path, exist_ok=True)
    log_file_path = os.path.join(log_dir_path, log_file_name)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(getattr(logging, settings.log_level, logging.INFO))

    file_handler = RotatingFileHandler(
        log_file_path, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    logger.propagate = False

    return logger
