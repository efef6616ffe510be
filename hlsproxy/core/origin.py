from __future__ import annotations

from typing import AsyncIterator, Callable, Mapping, Optional, Sequence
from urllib.parse import urlsplit

import httpx
from loguru import logger

from hlsproxy.config import UPSTREAM_MAX_REDIRECTS
from .errors import (
    InvalidTargetUrlError,
    OriginRejectedError,
    OriginStatusError,
    OriginUnreachableError,
)
from .identity import DEFAULT_PROFILES, IdentityProfile

_STREAM_CHUNK_SIZE = 64 * 1024
_ACCESS_DENIED = 403


def is_access_denied(status_code: int) -> bool:
    """
    Default rejection predicate: only 403 switches to the next identity.
    """
    return status_code == _ACCESS_DENIED


def redact_upstream(url: str) -> str:
    """
    Produce a redacted identifier for logging upstream URLs.
    """
    try:
        parsed = urlsplit(url)
        host = parsed.netloc
        path = parsed.path or "/"
        return f"{host}:{hash(path) & 0xFFFF_FFFF:x}"
    except ValueError:
        return "<redacted>"


def _build_async_client(*, timeout: float) -> httpx.AsyncClient:
    """
    Build an AsyncClient for one upstream request without env proxies.
    """
    logger.trace("Building upstream AsyncClient (timeout={}s)", timeout)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        max_redirects=UPSTREAM_MAX_REDIRECTS,
        trust_env=False,
    )


class UpstreamResponse:
    """
    An open upstream response together with the client that owns its connection.
    """

    def __init__(
        self,
        response: httpx.Response,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
    ) -> None:
        self.response = response
        self.client = client
        self.profile = profile

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    async def read(self) -> bytes:
        """
        Read the whole body and release the connection.
        """
        try:
            return await self.response.aread()
        finally:
            await self.aclose()

    async def iter_raw(self) -> AsyncIterator[bytes]:
        """
        Yield the undecoded body in chunks, releasing the connection once exhausted or abandoned.
        """
        try:
            async for chunk in self.response.aiter_raw(chunk_size=_STREAM_CHUNK_SIZE):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()
        await self.client.aclose()


async def open_upstream(
    url: str, *, headers: Mapping[str, str], timeout: float
) -> tuple[httpx.Response, httpx.AsyncClient]:
    """
    Open an upstream streaming GET and return the response + client.

    Raises:
        InvalidTargetUrlError: If httpx refuses the URL.
        OriginUnreachableError: On timeouts, connection and DNS failures.
    """
    logger.trace("Opening upstream GET {}", redact_upstream(url))
    client = _build_async_client(timeout=timeout)
    try:
        request = client.build_request("GET", url, headers=headers)
        response = await client.send(request, stream=True)
    except httpx.InvalidURL as exc:
        await client.aclose()
        raise InvalidTargetUrlError(f"Invalid URL: {url}") from exc
    except httpx.TimeoutException as exc:
        await client.aclose()
        raise OriginUnreachableError(f"Timed out fetching origin: {exc}") from exc
    except httpx.HTTPError as exc:
        await client.aclose()
        raise OriginUnreachableError(f"Could not reach origin: {exc}") from exc
    return response, client


async def open_with_fallback(
    url: str,
    *,
    timeout: float,
    accept: Optional[str] = None,
    extra_headers: Optional[Mapping[str, str]] = None,
    profiles: Sequence[IdentityProfile] = DEFAULT_PROFILES,
    is_rejection: Callable[[int], bool] = is_access_denied,
) -> UpstreamResponse:
    """
    Open an upstream response, switching identity when the origin rejects one.

    Profiles are tried in order. A status matching `is_rejection` moves on to
    the next profile; any other failure is surfaced at once. With the default
    two profiles this is a single retry under the fallback identity.

    Parameters:
        url (str): Absolute upstream URL.
        timeout (float): Seconds allowed for each network operation of an attempt.
        accept (Optional[str]): `Accept` header overriding the profiles' own.
        extra_headers (Optional[Mapping[str, str]]): Request-specific headers such as `Range`.
        profiles (Sequence[IdentityProfile]): Identities to present, primary first.
        is_rejection (Callable[[int], bool]): Decides whether a status warrants the next identity.

    Returns:
        UpstreamResponse: Open response with a 2xx/3xx status; the caller must read or close it.

    Raises:
        OriginUnreachableError: Network failure or timeout on any attempt.
        OriginRejectedError: Every profile was refused with 403.
        OriginStatusError: Origin answered with another non-success status.
    """
    if not profiles:
        raise ValueError("at least one identity profile is required")

    last_index = len(profiles) - 1
    for index, profile in enumerate(profiles):
        headers = profile.build_headers(url, accept=accept, extra=extra_headers)
        response, client = await open_upstream(url, headers=headers, timeout=timeout)
        status = response.status_code
        logger.trace(
            "Upstream status={} profile={} for {}", status, profile.name, redact_upstream(url)
        )

        if status < 400:
            if index:
                logger.info(
                    "Origin accepted fallback identity '{}' for {}",
                    profile.name,
                    redact_upstream(url),
                )
            return UpstreamResponse(response, client, profile)

        await response.aclose()
        await client.aclose()

        if is_rejection(status) and index < last_index:
            logger.warning(
                "Origin rejected identity '{}' with {} (upstream={}); retrying as '{}'",
                profile.name,
                status,
                redact_upstream(url),
                profiles[index + 1].name,
            )
            continue

        logger.error("Origin answered {} for {}", status, redact_upstream(url))
        if status == _ACCESS_DENIED:
            raise OriginRejectedError(
                f"Request failed with status code {status}", upstream_status=status
            )
        raise OriginStatusError(
            f"Request failed with status code {status}", upstream_status=status
        )

    # unreachable: the last profile either returns or raises
    raise OriginStatusError("No identity profile accepted")


async def fetch_bytes(
    url: str,
    *,
    timeout: float,
    accept: Optional[str] = None,
    profiles: Sequence[IdentityProfile] = DEFAULT_PROFILES,
) -> tuple[bytes, httpx.Headers]:
    """
    Fetch a complete upstream body with identity fallback.

    Returns:
        tuple[bytes, httpx.Headers]: The body and the upstream response headers.
    """
    upstream = await open_with_fallback(
        url, timeout=timeout, accept=accept, profiles=profiles
    )
    try:
        body = await upstream.read()
    except httpx.TimeoutException as exc:
        raise OriginUnreachableError(f"Timed out reading origin: {exc}") from exc
    except httpx.HTTPError as exc:
        raise OriginUnreachableError(f"Could not read origin: {exc}") from exc
    logger.debug("Fetched {} bytes from {}", len(body), redact_upstream(url))
    return body, upstream.headers
