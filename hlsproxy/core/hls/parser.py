from __future__ import annotations

from typing import Optional, Union

from loguru import logger

from .types import Number, PlaylistDocument, PlaylistKind, Segment, Variant

_HEADER = "#EXTM3U"
_MEDIA_SEQUENCE_PREFIX = "#EXT-X-MEDIA-SEQUENCE:"
_TARGET_DURATION_PREFIX = "#EXT-X-TARGETDURATION:"
_PLAYLIST_TYPE_PREFIX = "#EXT-X-PLAYLIST-TYPE:"
_END_LIST = "#EXT-X-ENDLIST"
_STREAM_INF_PREFIX = "#EXT-X-STREAM-INF:"
_EXTINF_PREFIX = "#EXTINF:"


def split_attribute_list(raw: str) -> list[str]:
    """
    Split an HLS attribute list by commas while respecting quoted values.

    `BANDWIDTH=1,CODECS="avc1,mp4a"` yields two items, not three.
    """
    parts: list[str] = []
    buf: list[str] = []
    in_quotes = False
    for ch in raw:
        if ch == '"':
            in_quotes = not in_quotes
        if ch == "," and not in_quotes:
            part = "".join(buf).strip()
            if part:
                parts.append(part)
            buf = []
            continue
        buf.append(ch)
    tail = "".join(buf).strip()
    if tail:
        parts.append(tail)
    return parts


def parse_attributes(raw: str) -> dict[str, str]:
    """
    Parse an attribute list into an ordered name -> raw value mapping.

    Values are kept verbatim, quotes included; items without `=` are dropped.
    """
    attributes: dict[str, str] = {}
    for item in split_attribute_list(raw):
        if "=" not in item:
            logger.trace("Skipping attribute without value: {}", item)
            continue
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            continue
        attributes[key] = value.strip()
    return attributes


def _parse_number(raw: str) -> Optional[Number]:
    """
    Parse a decimal value, keeping integers as `int` so they serialize unchanged.
    """
    text = raw.strip()
    if not text:
        return None
    try:
        if any(ch in text for ch in ".eE"):
            return float(text)
        return int(text)
    except ValueError:
        return None


def _parse_extinf(raw: str) -> tuple[Optional[Number], Optional[str]]:
    duration_raw, _, title = raw.partition(",")
    duration = _parse_number(duration_raw)
    if duration is None or duration < 0:
        duration = None
        logger.warning("Ignoring unparsable EXTINF duration: {!r}", duration_raw)
    return duration, (title.strip() or None)


class _PlaylistBuilder:
    """
    Accumulates records line by line; at most one record is open at a time.
    """

    def __init__(self) -> None:
        self.doc = PlaylistDocument()
        self._open: Union[Variant, Segment, None] = None

    def open_record(self, record: Union[Variant, Segment]) -> None:
        self.close_record()
        self._open = record

    def close_record(self) -> None:
        record = self._open
        if record is None:
            return
        self._open = None
        if isinstance(record, Variant):
            self.doc.variants.append(record)
        else:
            self.doc.segments.append(record)

    def attach_uri(self, uri: str) -> None:
        if self._open is None:
            logger.debug("URI line without EXTINF; keeping it as a segment without duration")
            self._open = Segment()
        self._open.uri = uri
        self.close_record()

    def finish(self) -> PlaylistDocument:
        self.close_record()
        doc = self.doc
        if doc.variants:
            doc.kind = PlaylistKind.MASTER
            if doc.segments:
                logger.warning(
                    "Playlist mixes variants and segments; dropping {} segments",
                    len(doc.segments),
                )
                doc.segments = []
            if doc.has_media_fields():
                logger.debug("Dropping media playlist fields from master playlist")
                doc.media_sequence = None
                doc.target_duration = None
                doc.playlist_type = None
                doc.end_list = False
        else:
            doc.kind = PlaylistKind.MEDIA
        return doc


def parse_playlist(playlist_text: str) -> PlaylistDocument:
    """
    Parse HLS playlist text into a `PlaylistDocument`.

    Parsing is tolerant: unknown tags, comments and unparsable scalar values
    are ignored instead of failing. A playlist with stream-info records is a
    master playlist; anything else, including a playlist without any record,
    is a media playlist.

    Parameters:
        playlist_text (str): Raw playlist text.

    Returns:
        PlaylistDocument: Structured representation with variants or segments in playlist order.
    """
    builder = _PlaylistBuilder()
    doc = builder.doc

    for raw_line in playlist_text.splitlines():
        line = raw_line.strip()
        if not line or line == _HEADER:
            continue
        if not line.startswith("#"):
            builder.attach_uri(line)
            continue

        if line.startswith(_STREAM_INF_PREFIX):
            attrs = parse_attributes(line[len(_STREAM_INF_PREFIX) :])
            builder.open_record(Variant(attributes=attrs))
        elif line.startswith(_EXTINF_PREFIX):
            duration, title = _parse_extinf(line[len(_EXTINF_PREFIX) :])
            builder.open_record(Segment(duration=duration, title=title))
        elif line.startswith(_MEDIA_SEQUENCE_PREFIX):
            value = _parse_number(line[len(_MEDIA_SEQUENCE_PREFIX) :])
            if isinstance(value, int) and value >= 0:
                doc.media_sequence = value
            else:
                logger.warning("Ignoring invalid media sequence: {!r}", line)
        elif line.startswith(_TARGET_DURATION_PREFIX):
            value = _parse_number(line[len(_TARGET_DURATION_PREFIX) :])
            if value is not None and value >= 0:
                doc.target_duration = value
            else:
                logger.warning("Ignoring invalid target duration: {!r}", line)
        elif line.startswith(_PLAYLIST_TYPE_PREFIX):
            doc.playlist_type = line[len(_PLAYLIST_TYPE_PREFIX) :].strip() or None
        elif line == _END_LIST:
            doc.end_list = True
        else:
            logger.trace("Ignoring HLS line: {}", line)

    doc = builder.finish()
    logger.debug(
        "Parsed {} playlist ({} variants, {} segments)",
        doc.kind.value,
        len(doc.variants),
        len(doc.segments),
    )
    return doc
