from __future__ import annotations

from typing import Optional


class ProxyError(Exception):
    """Base class for failures surfaced to proxy clients."""

    kind = "ProxyError"
    status_code = 500

    def __init__(self, message: str, *, upstream_status: Optional[int] = None) -> None:
        """
        Initialize the error with a readable message and the origin status, if any.

        Parameters:
            message (str): Human-readable description returned to the client as `details`.
            upstream_status (Optional[int]): HTTP status returned by the origin when one was received.
        """
        self.message = message
        self.upstream_status = upstream_status
        super().__init__(message)


class MissingParameterError(ProxyError):
    """No target URL supplied."""

    kind = "MissingParameter"
    status_code = 400


class InvalidTargetUrlError(ProxyError, ValueError):
    """Target URL is not an absolute http(s) URL."""

    kind = "InvalidParameter"
    status_code = 400


class OriginUnreachableError(ProxyError):
    """Network failure, timeout or DNS error while reaching the origin."""

    kind = "OriginUnreachable"


class OriginStatusError(ProxyError):
    """Origin answered with a non-success status."""

    kind = "OriginError"


class OriginRejectedError(OriginStatusError):
    """Origin refused access (403) for every identity profile tried."""

    kind = "OriginRejected"


class MalformedPlaylistError(ProxyError):
    """Fetched playlist bytes could not be decoded as text."""

    kind = "MalformedPlaylist"


class SerializationFaultError(ProxyError):
    """A rewritten document violated a playlist invariant."""

    kind = "InternalSerializationFault"
