"""Logging setup for the tinymonth package.

Console output always; a rotating log file when a directory is given.
"""
from pathlib import Path
from typing import Optional, Union
import logging
import logging.handlers

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
    app_name: str = "tinymonth",
) -> logging.Logger:
    """Configure the package logger once and return it.

    Calling it again only updates the level; handlers are not duplicated.
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
