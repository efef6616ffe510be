from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlsplit

PLAYLIST_ACCEPT = (
    "application/vnd.apple.mpegurl, application/x-mpegURL, application/octet-stream, */*"
)
SEGMENT_ACCEPT = "*/*"


@dataclass(frozen=True)
class IdentityProfile:
    """
    Set of outbound headers presented to the origin as one client identity.
    """

    name: str
    headers: Mapping[str, str] = field(default_factory=dict)
    send_origin_headers: bool = False

    def build_headers(
        self,
        url: str,
        *,
        accept: Optional[str] = None,
        extra: Optional[Mapping[str, str]] = None,
    ) -> dict[str, str]:
        """
        Build the request headers for fetching `url` under this identity.

        Parameters:
            url (str): Absolute upstream URL; its scheme and host feed `Referer`/`Origin` when enabled.
            accept (Optional[str]): Overrides the profile's `Accept` header when given.
            extra (Optional[Mapping[str, str]]): Request-specific headers (e.g. `Range`) applied last.

        Returns:
            dict[str, str]: A fresh header mapping.
        """
        headers = dict(self.headers)
        if accept:
            headers["Accept"] = accept
        if self.send_origin_headers:
            parsed = urlsplit(url)
            if parsed.scheme and parsed.netloc:
                origin = f"{parsed.scheme}://{parsed.netloc}"
                headers["Referer"] = origin + "/"
                headers["Origin"] = origin
        if extra:
            headers.update(extra)
        return headers


BROWSER_PROFILE = IdentityProfile(
    name="browser",
    headers={
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": PLAYLIST_ACCEPT,
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Fetch-Dest": "empty",
        "Sec-Fetch-Mode": "cors",
        "Sec-Fetch-Site": "cross-site",
    },
    send_origin_headers=True,
)

MEDIA_PLAYER_PROFILE = IdentityProfile(
    name="media-player",
    headers={
        "User-Agent": "VLC/3.0.16 LibVLC/3.0.16",
        "Accept": "application/vnd.apple.mpegurl, application/x-mpegURL, */*",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "identity",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    },
)

# Primary identity first; the second entry is the one-shot fallback.
DEFAULT_PROFILES: tuple[IdentityProfile, ...] = (BROWSER_PROFILE, MEDIA_PLAYER_PROFILE)
