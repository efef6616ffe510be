from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path

DISTRIBUTION = "hlsproxy"
UNKNOWN_VERSION = "0.0.0"

# Checkout layout: VERSION sits next to the hlsproxy package directory.
_VERSION_FILE = Path(__file__).resolve().parents[1] / "VERSION"


def get_version() -> str:
    """Version from the checkout's VERSION file, else the installed distribution."""
    if _VERSION_FILE.exists():
        text = _VERSION_FILE.read_text(encoding="utf-8").strip()
        if text:
            return text
    try:
        return _dist_version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__version__ = get_version()
