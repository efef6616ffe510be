from __future__ import annotations

from loguru import logger

from .types import PlaylistDocument
from .urls import build_proxy_url, resolve_url


def rewrite_playlist(
    doc: PlaylistDocument,
    *,
    base_url: str,
    segment_endpoint: str,
    playlist_endpoint: str,
) -> PlaylistDocument:
    """
    Point every segment and variant URI of a parsed playlist back at the proxy.

    Each URI is resolved against `base_url` first, then wrapped as
    `<endpoint>?url=<percent-encoded absolute URL>`. Segments go to
    `segment_endpoint`, variants (nested playlists) to `playlist_endpoint`.
    Entries without a URI, attributes, durations and ordering are left alone.

    Parameters:
        doc (PlaylistDocument): Parsed playlist; mutated in place.
        base_url (str): Directory URL of the playlist (see `playlist_base_url`).
        segment_endpoint (str): Path of the segment relay endpoint.
        playlist_endpoint (str): Path of the playlist proxy endpoint.

    Returns:
        PlaylistDocument: The same document instance.
    """
    logger.debug("Rewriting HLS playlist from {}", base_url)
    rewritten = 0
    for segment in doc.segments:
        if not segment.uri:
            continue
        segment.uri = build_proxy_url(segment_endpoint, resolve_url(base_url, segment.uri))
        rewritten += 1
    for variant in doc.variants:
        if not variant.uri:
            continue
        variant.uri = build_proxy_url(playlist_endpoint, resolve_url(base_url, variant.uri))
        rewritten += 1
    logger.debug("Rewrote {} playlist references", rewritten)
    return doc
