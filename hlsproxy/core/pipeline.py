from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, Mapping, Optional

import httpx
from loguru import logger

from hlsproxy.config import PLAYLIST_FETCH_TIMEOUT, SEGMENT_FETCH_TIMEOUT
from .errors import MalformedPlaylistError, SerializationFaultError
from .hls import (
    PlaylistInvariantError,
    parse_playlist,
    playlist_base_url,
    rewrite_playlist,
    serialize_playlist,
    validate_target_url,
)
from .identity import PLAYLIST_ACCEPT, SEGMENT_ACCEPT
from .origin import fetch_bytes, open_with_fallback, redact_upstream

_SEGMENT_HEADERS = {
    "content-type",
    "content-length",
    "content-range",
    "accept-ranges",
    "content-encoding",
}
_DEFAULT_SEGMENT_TYPE = "video/mp2t"


def decode_playlist(body: bytes, charset: Optional[str] = None) -> str:
    """
    Decode fetched playlist bytes, stripping a UTF-8 byte order mark.

    Raises:
        MalformedPlaylistError: If the bytes are not valid text in the declared charset (UTF-8 by default).
    """
    encoding = charset or "utf-8"
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        return body.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        raise MalformedPlaylistError(f"Playlist is not decodable as text: {exc}") from exc


def render_playlist(
    playlist_text: str,
    *,
    base_url: str,
    segment_endpoint: str,
    playlist_endpoint: str,
) -> str:
    """
    Parse, rewrite and serialize one playlist. Pure; performs no I/O.

    Raises:
        SerializationFaultError: If the rewritten document breaks a playlist invariant.
    """
    doc = parse_playlist(playlist_text)
    rewrite_playlist(
        doc,
        base_url=base_url,
        segment_endpoint=segment_endpoint,
        playlist_endpoint=playlist_endpoint,
    )
    try:
        return serialize_playlist(doc)
    except PlaylistInvariantError as exc:
        logger.exception("Rewritten playlist violates an invariant: {!r}", doc)
        raise SerializationFaultError(f"Playlist serialization failed: {exc}") from exc


async def proxy_playlist(
    url: str, *, segment_endpoint: str, playlist_endpoint: str
) -> str:
    """
    Fetch a playlist from the origin and return it rewritten to route through the proxy.

    The target URL is validated before any network access. Fetching uses the
    identity fallback policy; the playlist is then parsed, every variant and
    segment reference is rewritten relative to the playlist's directory, and
    the document is serialized again.

    Parameters:
        url (str): Absolute origin URL of the playlist.
        segment_endpoint (str): Path rewritten segment references point to.
        playlist_endpoint (str): Path rewritten variant references point to.

    Returns:
        str: Rewritten playlist text.

    Raises:
        ProxyError: Any failure; no partial playlist is ever returned.
    """
    base_url = playlist_base_url(url)
    logger.info("Proxying m3u8 playlist upstream={}", redact_upstream(url))
    body, headers = await fetch_bytes(
        url, timeout=PLAYLIST_FETCH_TIMEOUT, accept=PLAYLIST_ACCEPT
    )
    charset = _charset_of(headers)
    playlist_text = decode_playlist(body, charset)
    rewritten = render_playlist(
        playlist_text,
        base_url=base_url,
        segment_endpoint=segment_endpoint,
        playlist_endpoint=playlist_endpoint,
    )
    logger.success("Rewrote HLS playlist ({} bytes)", len(rewritten))
    return rewritten


def _charset_of(headers: Mapping[str, str]) -> Optional[str]:
    content_type = headers.get("content-type", "")
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


@dataclass
class SegmentStream:
    """
    An upstream segment ready to be relayed to the client.
    """

    status_code: int
    headers: dict[str, str]
    body: AsyncIterator[bytes]


def _filter_segment_headers(headers: httpx.Headers) -> dict[str, str]:
    """
    Keep the upstream headers a player needs for byte-range playback.
    """
    out: dict[str, str] = {}
    for k, v in headers.items():
        if k.lower() in _SEGMENT_HEADERS:
            out[k] = v
    if not any(k.lower() == "content-type" for k in out):
        out["Content-Type"] = _DEFAULT_SEGMENT_TYPE
    return out


async def open_segment(url: str, *, range_header: Optional[str] = None) -> SegmentStream:
    """
    Open a segment on the origin for pass-through relay.

    The client's `Range` header is forwarded; content is never transformed.

    Raises:
        ProxyError: If the URL is invalid or the origin cannot be fetched.
    """
    validate_target_url(url)
    logger.info("Proxying segment upstream={}", redact_upstream(url))
    extra = {"Range": range_header} if range_header else None
    upstream = await open_with_fallback(
        url,
        timeout=SEGMENT_FETCH_TIMEOUT,
        accept=SEGMENT_ACCEPT,
        extra_headers=extra,
    )
    headers = _filter_segment_headers(upstream.headers)
    logger.debug("Streaming segment (status={})", upstream.status_code)
    return SegmentStream(
        status_code=upstream.status_code,
        headers=headers,
        body=upstream.iter_raw(),
    )
