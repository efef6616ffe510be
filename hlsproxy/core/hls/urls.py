from __future__ import annotations

from urllib.parse import SplitResult, quote, urljoin, urlsplit

from loguru import logger

from hlsproxy.core.errors import InvalidTargetUrlError

_ABSOLUTE_SCHEMES = ("http", "https")


def validate_target_url(url: str) -> SplitResult:
    """
    Ensure a client-supplied target is an absolute http(s) URL with a host.

    Raises:
        InvalidTargetUrlError: If the URL cannot be parsed or is not absolute http(s).
    """
    try:
        parsed = urlsplit(url)
        # raises on a non-numeric or out-of-range port
        parsed.port
    except ValueError as exc:
        raise InvalidTargetUrlError(f"Invalid URL: {url}") from exc
    if parsed.scheme.lower() not in _ABSOLUTE_SCHEMES or not parsed.hostname:
        raise InvalidTargetUrlError(f"Invalid URL: {url}")
    return parsed


def playlist_base_url(url: str) -> str:
    """
    Compute the directory URL of a playlist, used to resolve its references.

    Parameters:
        url (str): Absolute http(s) URL of the playlist.

    Returns:
        str: `scheme://host` followed by the playlist path with its last segment removed and a trailing slash.
            Query string and fragment are dropped.

    Raises:
        InvalidTargetUrlError: If `url` is not an absolute http(s) URL with a host.
    """
    parsed = validate_target_url(url)
    directory = parsed.path.rsplit("/", 1)[0] if "/" in parsed.path else ""
    base = f"{parsed.scheme}://{parsed.netloc}{directory}/"
    logger.trace("Playlist base for {} is {}", parsed.netloc, base)
    return base


def resolve_url(base_url: str, reference: str) -> str:
    """
    Resolve a URI found inside a playlist against the playlist's base URL.

    Absolute http(s) references are returned unchanged; anything else goes
    through standard relative resolution, so `.`/`..` collapse and a
    reference starting with `/` replaces the whole path.
    """
    if urlsplit(reference).scheme.lower() in _ABSOLUTE_SCHEMES:
        return reference
    return urljoin(base_url, reference)


def build_proxy_url(endpoint: str, absolute_url: str) -> str:
    """
    Build the proxy-relative URL that routes `absolute_url` back through `endpoint`.

    The absolute URL is percent-encoded as a single query component so its own
    `?`, `&` and `:` cannot leak into the outer query string.
    """
    return f"{endpoint}?url={quote(absolute_url, safe='')}"
