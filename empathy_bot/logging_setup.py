"""Loguru sink configuration shared by the server and the terminal client."""

import sys

from loguru import logger

from empathy_bot.config import Config


def configure_logging(level: str = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or Config.LOG_LEVEL).upper())
