import logging
import sys
from logging.handlers import RotatingFileHandler

from . import settings


def setup_logger(name: str = None, log_level: int | str = settings.LOG_LEVEL) -> logging.Logger:
    """
    Sets up a logger with both console (StreamHandler) and file (RotatingFileHandler) output.
    Calling it again for the same name returns the already configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Configured once per name; handlers on ancestor loggers do not count
    if logger.handlers:
        return logger

    console_format = logging.Formatter("%(message)s")
    file_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # 1. Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # 2. File Handler
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = settings.LOG_DIR / "inventory_search.log"

    file_handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"  # 5 MB
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger
