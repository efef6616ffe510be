from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from hlsproxy._version import __version__
from hlsproxy.config import (
    CORS_ORIGINS_LIST,
    HLSPROXY_HOST,
    HLSPROXY_PORT,
    PLAYLIST_FETCH_TIMEOUT,
    SEGMENT_FETCH_TIMEOUT,
)


def log_config_summary() -> None:
    """Log the settings that shape outbound fetching and CORS."""
    logger.info(
        f"hlsproxy {__version__} listening on {HLSPROXY_HOST}:{HLSPROXY_PORT}"
    )
    logger.info(
        f"CORS origins: {', '.join(CORS_ORIGINS_LIST) or '<disabled>'}"
    )
    logger.info(
        f"Upstream timeouts: playlist={PLAYLIST_FETCH_TIMEOUT}s segment={SEGMENT_FETCH_TIMEOUT}s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        log_config_summary()
    except Exception as e:
        logger.warning(f"log_config_summary failed: {e}")
    logger.info("CORS Video Proxy ready. Health check: /health")
    try:
        yield
    finally:
        logger.info("Application shutdown.")
