from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

Number = Union[int, float]


class PlaylistKind(str, Enum):
    MASTER = "master"
    MEDIA = "media"


@dataclass
class Variant:
    """
    One `#EXT-X-STREAM-INF` entry of a master playlist.

    `attributes` keeps the attribute names and raw values (quotes included)
    in the order they were encountered.
    """

    uri: str = ""
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class Segment:
    """
    One media segment entry of a media playlist.
    """

    uri: Optional[str] = None
    duration: Optional[Number] = None
    title: Optional[str] = None


@dataclass
class PlaylistDocument:
    """
    Parsed form of one playlist fetched from one URL.

    Built fresh for each proxied request and discarded once serialized.
    """

    kind: PlaylistKind = PlaylistKind.MEDIA
    media_sequence: Optional[int] = None
    target_duration: Optional[Number] = None
    playlist_type: Optional[str] = None
    end_list: bool = False
    variants: list[Variant] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)

    @property
    def is_master(self) -> bool:
        return self.kind is PlaylistKind.MASTER

    def has_media_fields(self) -> bool:
        """
        Return whether any field that only belongs to media playlists is set.
        """
        return (
            self.media_sequence is not None
            or self.target_duration is not None
            or self.playlist_type is not None
            or self.end_list
        )
