"""Logging setup for the slop detector.

All modules obtain the package logger through get_logger() so a single
handler configuration applies to the whole engine.
"""

import logging
import sys

LOGGER_NAME = "slop_detector"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children.

    Args:
        name: Optional child logger suffix (e.g. "engine")

    Returns:
        Logger instance under the slop_detector namespace
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the package logger with a single stderr handler.

    Args:
        verbose: Enable DEBUG output
        quiet: Only show errors

    Returns:
        The configured package logger
    """
    logger = get_logger()

    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger.setLevel(level)

    # Replace handlers from a previous call instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
