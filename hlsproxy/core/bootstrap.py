from __future__ import annotations

from dotenv import load_dotenv
from loguru import logger

from hlsproxy.utils.logger import config as configure_logger


def init() -> None:
    """Initialize environment and logging early.

    - Loads .env
    - Configures loguru
    """
    load_dotenv()
    configure_logger()
    logger.debug("Environment loaded and logger configured")
