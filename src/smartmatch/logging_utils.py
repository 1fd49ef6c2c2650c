"""
Logging setup for the smartmatch package.

Library modules never configure logging themselves; they log through
``logging.getLogger(__name__)``, which makes them children of the
``smartmatch`` logger. Applications that want those records on disk call
``setup_logger`` once with their Config.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .config import Config

LOGGER_NAME = "smartmatch"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _create_file_handler(config: Config) -> logging.Handler:
    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_path,
        maxBytes=config.max_log_size,
        backupCount=config.log_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def setup_logger(config: Optional[Config] = None) -> logging.Logger:
    """Attach a rotating file handler to the ``smartmatch`` logger.

    The handler is added on the first call only. Later calls keep that
    handler but apply the level of the config they are given, so a CLI
    ``--log-level`` still takes effect after the logger exists.

    Args:
        config: Configuration object, uses defaults if None

    Returns:
        The ``smartmatch`` logger

    Raises:
        OSError: If log file cannot be created
    """
    if config is None:
        config = Config()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    if not logger.handlers:
        logger.addHandler(_create_file_handler(config))

    return logger


def log_error(
    message: str, exception: Optional[Exception] = None, config: Optional[Config] = None
) -> None:
    """Log an error, with the traceback of ``exception`` when one is given.

    Args:
        message: Error message to log
        exception: Optional exception to include in log
        config: Configuration object, uses defaults if None
    """
    logger = setup_logger(config)

    if exception is None:
        logger.error(message)
    else:
        logger.error("%s: %s", message, exception, exc_info=exception)
