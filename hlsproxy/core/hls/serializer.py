from __future__ import annotations

from loguru import logger

from .types import Number, PlaylistDocument


class PlaylistInvariantError(ValueError):
    """Raised when a document mixes master and media playlist semantics."""


def _format_number(value: Number) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


def check_document(doc: PlaylistDocument) -> None:
    """
    Verify that a document carries only the fields of its own kind.

    Raises:
        PlaylistInvariantError: If a master document holds segments or media
            fields, or a media document holds variants.
    """
    if doc.is_master:
        if doc.segments:
            raise PlaylistInvariantError(
                f"master playlist carries {len(doc.segments)} segments"
            )
        if doc.has_media_fields():
            raise PlaylistInvariantError("master playlist carries media playlist fields")
    elif doc.variants:
        raise PlaylistInvariantError(
            f"media playlist carries {len(doc.variants)} variants"
        )


def serialize_playlist(doc: PlaylistDocument) -> str:
    """
    Render a `PlaylistDocument` back to HLS playlist text.

    The header comes first, then the media sequence, target duration,
    playlist type and end-list marker (each only when present, in that
    order), then variants or segments in document order. Attribute maps are
    written in insertion order, so the same document always renders to the
    same text.

    Parameters:
        doc (PlaylistDocument): Document to render.

    Returns:
        str: Playlist text; every line ends with a newline.

    Raises:
        PlaylistInvariantError: If the document mixes master and media semantics.
    """
    check_document(doc)

    lines: list[str] = ["#EXTM3U"]
    if doc.media_sequence is not None:
        lines.append(f"#EXT-X-MEDIA-SEQUENCE:{doc.media_sequence}")
    if doc.target_duration is not None:
        lines.append(f"#EXT-X-TARGETDURATION:{_format_number(doc.target_duration)}")
    if doc.playlist_type:
        lines.append(f"#EXT-X-PLAYLIST-TYPE:{doc.playlist_type}")
    if doc.end_list:
        lines.append("#EXT-X-ENDLIST")

    for variant in doc.variants:
        attrs = ",".join(f"{key}={value}" for key, value in variant.attributes.items())
        lines.append(f"#EXT-X-STREAM-INF:{attrs}")
        lines.append(variant.uri or "")

    for segment in doc.segments:
        if segment.duration is not None:
            lines.append(f"#EXTINF:{_format_number(segment.duration)},{segment.title or ''}")
        if segment.uri:
            lines.append(segment.uri)

    logger.trace("Serialized {} playlist ({} lines)", doc.kind.value, len(lines))
    return "\n".join(lines) + "\n"
