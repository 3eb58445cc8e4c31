"""Logging setup for the application and the fetch pipeline."""

import logging

PACKAGE_LOGGER = "newsbrief"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Install a console handler on the package logger.

    Calling this more than once keeps the existing handler and only
    adjusts the level.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
