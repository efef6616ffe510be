from .types import PlaylistDocument, PlaylistKind, Segment, Variant
from .urls import build_proxy_url, playlist_base_url, resolve_url, validate_target_url
from .parser import parse_attributes, parse_playlist, split_attribute_list
from .rewrite import rewrite_playlist
from .serializer import PlaylistInvariantError, check_document, serialize_playlist

__all__ = [
    "PlaylistDocument",
    "PlaylistKind",
    "Segment",
    "Variant",
    "build_proxy_url",
    "playlist_base_url",
    "resolve_url",
    "validate_target_url",
    "parse_attributes",
    "parse_playlist",
    "split_attribute_list",
    "rewrite_playlist",
    "PlaylistInvariantError",
    "check_document",
    "serialize_playlist",
]
