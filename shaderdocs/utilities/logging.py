"""
Logging setup for shaderdocs
Console output plus optional rotating log files
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_configured = False


def setup_logging(log_dir: str | None = None, log_level: str = 'INFO') -> None:
    """
    Configure the root logger (first call wins)

    Args:
        log_dir: Directory for log files; console only when None
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

        # Main log file handler (rotating)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, 'shaderdocs.log'),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # Error log file handler (separate file for errors)
        error_handler = RotatingFileHandler(
            os.path.join(log_dir, 'shaderdocs_errors.log'),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding='utf-8',
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
