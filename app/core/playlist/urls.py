from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import quote, urlencode

from loguru import logger

from app.config import PROXY_M3U8_PATH, PROXY_M3U8_TOKEN, SITE_BASE

PLAYABLE_MARKER = ".m3u8"
_LOOPBACK_HOSTS = ("localhost", "127.0.0.1")


def is_playable_url(url: str) -> bool:
    """Return whether the URL points at an HLS playlist the media proxy can serve."""
    return PLAYABLE_MARKER in url


def resolve_request_origin(headers: Mapping[str, str]) -> str:
    """
    Determine the scheme+host used for rewritten playback URLs.

    Priority: the configured SITE_BASE, else the inbound `host` (or
    `x-forwarded-host`) with `x-forwarded-proto`. Without a forwarded proto
    the scheme is `http` for loopback hosts and `https` otherwise.

    Parameters:
        headers (Mapping[str, str]): Inbound request headers (lower-case keys or a case-insensitive mapping).

    Returns:
        str: Origin without a trailing slash.
    """
    base = (SITE_BASE or "").strip()
    if base:
        return base.rstrip("/")
    host = (headers.get("host") or headers.get("x-forwarded-host") or "").strip()
    if not host:
        logger.warning("No host header available; assuming localhost origin.")
        host = "localhost"
    proto = (headers.get("x-forwarded-proto") or "").split(",")[0].strip()
    if not proto:
        proto = "http" if any(lb in host for lb in _LOOPBACK_HOSTS) else "https"
    origin = f"{proto}://{host}"
    logger.trace("Resolved request origin {}", origin)
    return origin


def build_m3u8_proxy_url(
    url: str, *, origin: str, source: str = "", token: Optional[str] = None
) -> str:
    """
    Build the absolute media-proxy reference for an upstream playlist URL.

    Parameters:
        url (str): Original playlist URL; encoded as the `url` parameter.
        origin (str): Scheme+host of the media proxy.
        source (str): Optional originating backend label (`source` parameter).
        token (str | None): Access token (`token` parameter); defaults to PROXY_M3U8_TOKEN.

    Returns:
        str: `{origin}/api/proxy-m3u8?url=...[&source=...][&token=...]`.
    """
    params: list[tuple[str, str]] = [("url", url)]
    if source:
        params.append(("source", source))
    tok = PROXY_M3U8_TOKEN if token is None else token
    if tok:
        params.append(("token", tok))
    path = "/" + PROXY_M3U8_PATH.lstrip("/")
    return f"{origin.rstrip('/')}{path}?{urlencode(params, quote_via=quote)}"


class M3u8ProxyRule:
    """
    Rewrite rule bound to one request origin.

    Calling it with `(url, source_label)` returns the media-proxy reference for
    playable URLs and the URL itself for everything else.
    """

    def __init__(self, origin: str, token: Optional[str] = None) -> None:
        self.origin = origin
        self.token = token

    def __call__(self, url: str, source_label: str) -> str:
        if not url or not is_playable_url(url):
            return url
        return build_m3u8_proxy_url(
            url, origin=self.origin, source=source_label, token=self.token
        )
