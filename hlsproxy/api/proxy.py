from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from loguru import logger

from hlsproxy.config import PLAYLIST_CACHE_CONTROL, SEGMENT_CACHE_CONTROL
from hlsproxy.core.errors import MissingParameterError, ProxyError
from hlsproxy.core.pipeline import open_segment, proxy_playlist

router = APIRouter()

HLS_MEDIA_TYPE = "application/vnd.apple.mpegurl"
_PLAYLIST_SUFFIX = "/m3u8"
_SEGMENT_SUFFIX = "/segment"


def _target_url(request: Request) -> str:
    """
    Read the required `url` query parameter.
    """
    url = (request.query_params.get("url") or "").strip()
    if not url:
        raise MissingParameterError("URL parameter is required")
    return url


def _route_prefix(request: Request, suffix: str) -> str:
    """
    Return the path prefix the client used, e.g. `/proxy` or `/api/proxy`.

    Rewritten references reuse it so follow-up requests come back through the
    same route family.
    """
    path = request.url.path
    return path[: -len(suffix)] if path.endswith(suffix) else path


def _error_response(exc: ProxyError, message: str) -> JSONResponse:
    """
    Build the structured failure body for a proxy request.
    """
    if isinstance(exc, MissingParameterError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    status = exc.upstream_status if exc.upstream_status is not None else "unknown"
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": message,
            "details": exc.message,
            "kind": exc.kind,
            "status": status,
        },
    )


@router.get("/proxy/m3u8")
@router.get("/api/proxy/m3u8")
async def proxy_m3u8(request: Request):
    """
    Fetch a remote playlist and return it with every reference routed through the proxy.
    """
    prefix = _route_prefix(request, _PLAYLIST_SUFFIX)
    try:
        url = _target_url(request)
        text = await proxy_playlist(
            url,
            segment_endpoint=prefix + _SEGMENT_SUFFIX,
            playlist_endpoint=prefix + _PLAYLIST_SUFFIX,
        )
    except ProxyError as exc:
        logger.error("Error proxying m3u8 playlist: {} ({})", exc.message, exc.kind)
        return _error_response(exc, "Failed to proxy m3u8 playlist")

    return Response(
        content=text.encode("utf-8"),
        media_type=HLS_MEDIA_TYPE,
        headers={"Cache-Control": PLAYLIST_CACHE_CONTROL},
    )


@router.get("/proxy/segment")
@router.get("/api/proxy/segment")
async def proxy_segment(request: Request):
    """
    Relay a remote media segment, forwarding the client's Range header.
    """
    try:
        url = _target_url(request)
        segment = await open_segment(url, range_header=request.headers.get("range"))
    except ProxyError as exc:
        logger.error("Error proxying segment: {} ({})", exc.message, exc.kind)
        return _error_response(exc, "Failed to proxy segment")

    headers = dict(segment.headers)
    headers["Cache-Control"] = SEGMENT_CACHE_CONTROL
    return StreamingResponse(
        segment.body,
        status_code=segment.status_code,
        headers=headers,
    )
