import os
import sys
from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def config():
    """
    Configure the global Loguru logger. Keeps this function lightweight so it
    can be imported across the codebase without side-effects.

    LOG_LEVEL selects the level (default INFO). When LOG_FILE is set, the same
    records are also appended to that file without colour codes.
    """
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    logger.remove()
    logger.add(
        sys.stdout,
        level=LOG_LEVEL,
        colorize=True,
        format=_FORMAT,
    )
    log_file = os.environ.get("LOG_FILE", "").strip()
    if log_file:
        logger.add(
            log_file,
            level=LOG_LEVEL,
            colorize=False,
            format=_FORMAT,
            enqueue=True,
        )
