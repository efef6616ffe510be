from __future__ import annotations

import sys
from loguru import logger

from hlsproxy.config import HLSPROXY_HOST, HLSPROXY_PORT, HLSPROXY_RELOAD


def _reload_enabled() -> bool:
    """Reload only when configured and not running from a frozen bundle."""
    is_frozen = getattr(sys, "frozen", False) or hasattr(sys, "_MEIPASS")
    return HLSPROXY_RELOAD and not is_frozen


def run_server(app_obj):
    """Run the Uvicorn server with sensible defaults.

    - Disables reload for packaged/production runs
    - Allows override via the HLSPROXY_RELOAD setting
    """
    import uvicorn

    if _reload_enabled():
        logger.info("Uvicorn reload enabled (development mode).")
        uvicorn.run(
            "hlsproxy.main:app",
            host=HLSPROXY_HOST,
            port=HLSPROXY_PORT,
            reload=True,
        )
    else:
        logger.info("Uvicorn reload disabled (packaged/production mode).")
        uvicorn.run(
            app_obj,
            host=HLSPROXY_HOST,
            port=HLSPROXY_PORT,
            reload=False,
        )


def main() -> None:
    from hlsproxy.main import app

    logger.info("Starting hlsproxy FastAPI server...")
    run_server(app)
