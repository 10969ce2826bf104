"""Logging configuration for Dinari.

Log records go to a per-day file under the configured log directory and,
unless disabled, to the console (stderr, so JSON written to stdout by the
recurring trigger stays machine-readable).
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "dinari"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also log to stderr.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # setup_logging may be called more than once per process (tests, scripts)
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"dinari-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The dinari logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
