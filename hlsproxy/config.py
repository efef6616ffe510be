import os
from dotenv import load_dotenv
from loguru import logger
from hlsproxy.utils.logger import config as configure_logger

# Load .env as early as possible so all downstream imports see the intended env
load_dotenv()

# Configure logger after env is loaded (LOG_LEVEL honored)
configure_logger()


def _as_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _as_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using {default}.")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive; using {default}.")
        return default
    return value


# --- Server ---
HLSPROXY_HOST = os.getenv("HLSPROXY_HOST", "0.0.0.0").strip() or "0.0.0.0"
HLSPROXY_PORT = int(os.getenv("HLSPROXY_PORT", os.getenv("PORT", "3000")) or 3000)
HLSPROXY_RELOAD = _as_bool(os.getenv("HLSPROXY_RELOAD", None), False)
logger.debug(f"HLSPROXY_HOST={HLSPROXY_HOST}, HLSPROXY_PORT={HLSPROXY_PORT}")

# --- CORS ---
# Comma-separated list of allowed origins; "*" allows any origin, empty disables CORS.
CORS_ORIGINS = os.getenv("CORS_ORIGINS", os.getenv("CORS_ORIGIN", "*")).strip()
CORS_ORIGINS_LIST = list(
    dict.fromkeys(o.strip() for o in CORS_ORIGINS.split(",") if o.strip())
)
CORS_ALLOW_CREDENTIALS = _as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", None), True)
logger.debug(
    f"CORS_ORIGINS={CORS_ORIGINS_LIST}, CORS_ALLOW_CREDENTIALS={CORS_ALLOW_CREDENTIALS}"
)

# --- Upstream fetching ---
# Upstream timeouts in seconds, applied to each connect, read, write and pool wait.
PLAYLIST_FETCH_TIMEOUT = _as_float("PLAYLIST_FETCH_TIMEOUT", 15.0)
SEGMENT_FETCH_TIMEOUT = _as_float("SEGMENT_FETCH_TIMEOUT", 30.0)
UPSTREAM_MAX_REDIRECTS = max(0, int(os.getenv("UPSTREAM_MAX_REDIRECTS", "5") or 0))
logger.debug(
    f"PLAYLIST_FETCH_TIMEOUT={PLAYLIST_FETCH_TIMEOUT}, SEGMENT_FETCH_TIMEOUT={SEGMENT_FETCH_TIMEOUT}, UPSTREAM_MAX_REDIRECTS={UPSTREAM_MAX_REDIRECTS}"
)

# --- Response caching directives ---
PLAYLIST_CACHE_CONTROL = "no-cache, no-store, must-revalidate"
SEGMENT_CACHE_CONTROL = (
    os.getenv("SEGMENT_CACHE_CONTROL", "public, max-age=3600").strip()
    or "public, max-age=3600"
)
logger.debug(f"SEGMENT_CACHE_CONTROL={SEGMENT_CACHE_CONTROL}")
