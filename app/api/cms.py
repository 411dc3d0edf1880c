from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import anyio
import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.config import (
    CMS_PROXY_TIMEOUT_SECONDS,
    CMS_PROXY_USER_AGENT,
    CMS_SYNTHESIZED_API,
    get_openlist_config,
)
from app.core.catalog import (
    CatalogEnvelope,
    CatalogSynthesizer,
    ErrorBody,
    rewrite_catalog_payload,
)
from app.core.metainfo import METAINFO_CACHE
from app.core.playlist import M3u8ProxyRule, resolve_request_origin
from app.providers import get_detail_fetcher

router = APIRouter()

LOCATOR_PARAM = "api"
_NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


@dataclass(frozen=True)
class UpstreamRequestContext:
    """Per-request forwarding state; never shared between requests."""

    target_url: str
    deadline_seconds: float
    origin: str


@dataclass(frozen=True)
class UpstreamResult:
    status_code: int
    payload: Any = None


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorBody(error=error, details=details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def _redact_upstream(url: str) -> str:
    """
    Produce a redacted identifier for logging upstream URLs.
    """
    try:
        parsed = urlsplit(url)
        return f"{parsed.netloc}:{hash(parsed.path or '/') & 0xFFFF_FFFF:x}"
    except Exception:
        return "<redacted>"


def build_target_url(api: str, params: Iterable[tuple[str, str]]) -> str:
    """
    Append every query parameter except the locator onto the upstream base URL.

    Parameters already present on `api` are kept first; repeated keys are kept
    in order.

    Raises:
        ValueError: If `api` is not an absolute http(s) URL.
    """
    parsed = urlsplit(api)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid URL: {api}")
    query = parse_qsl(parsed.query, keep_blank_values=True)
    query.extend((k, v) for k, v in params if k != LOCATOR_PARAM)
    return urlunsplit(parsed._replace(query=urlencode(query)))


def _build_async_client() -> httpx.AsyncClient:
    """
    Build an AsyncClient for upstream catalog calls without env proxies.

    The request deadline is enforced by the caller; the client timeout is a
    backstop only.
    """
    logger.trace("Building upstream AsyncClient")
    timeout = httpx.Timeout(CMS_PROXY_TIMEOUT_SECONDS + 5.0, connect=10.0)
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True, trust_env=False)


async def _fetch_upstream(ctx: UpstreamRequestContext) -> UpstreamResult:
    headers = {"User-Agent": CMS_PROXY_USER_AGENT, "Accept": "application/json"}
    async with _build_async_client() as client:
        response = await client.get(ctx.target_url, headers=headers)
        if not response.is_success:
            return UpstreamResult(status_code=response.status_code)
        return UpstreamResult(status_code=response.status_code, payload=response.json())


async def _handle_forward(request: Request, api: str) -> JSONResponse:
    ctx = UpstreamRequestContext(
        target_url=build_target_url(api, request.query_params.multi_items()),
        deadline_seconds=CMS_PROXY_TIMEOUT_SECONDS,
        origin=resolve_request_origin(request.headers),
    )
    logger.info("CMS proxy request upstream={}", _redact_upstream(ctx.target_url))

    try:
        with anyio.fail_after(ctx.deadline_seconds):
            result = await _fetch_upstream(ctx)
    except (TimeoutError, httpx.TimeoutException):
        logger.error(
            "CMS upstream timed out after {}s: {}",
            ctx.deadline_seconds,
            _redact_upstream(ctx.target_url),
        )
        return _error(504, "请求超时")

    if result.status_code < 200 or result.status_code >= 300:
        logger.error(
            "CMS upstream failed with status {}: {}",
            result.status_code,
            _redact_upstream(ctx.target_url),
        )
        return _error(result.status_code, "请求 CMS API 失败")

    payload = result.payload
    if isinstance(payload, dict):
        entries = payload.get("list")
        logger.debug(
            "CMS upstream returned code={} page={} pagecount={} total={} entries={}",
            payload.get("code"),
            payload.get("page"),
            payload.get("pagecount"),
            payload.get("total"),
            len(entries) if isinstance(entries, list) else 0,
        )
    logger.debug("CMS proxy origin: {}", ctx.origin)
    rewritten = rewrite_catalog_payload(payload, M3u8ProxyRule(ctx.origin))
    logger.success("CMS proxy response ready for {}", _redact_upstream(ctx.target_url))
    return JSONResponse(rewritten, headers=_NO_CACHE_HEADERS)


async def _handle_synthesized(request: Request) -> JSONResponse:
    config = get_openlist_config()
    if config is None:
        logger.info("Synthesized catalog requested but OpenList is not configured.")
        return JSONResponse(CatalogEnvelope.empty("OpenList 未配置").dump())

    meta = await anyio.to_thread.run_sync(METAINFO_CACHE.get)
    if meta is None:
        return JSONResponse(CatalogEnvelope.empty("无数据").dump())

    origin = resolve_request_origin(request.headers)
    fetcher = get_detail_fetcher(origin, config)
    synthesizer = CatalogSynthesizer(meta, fetcher)
    params = dict(request.query_params)
    envelope = await anyio.to_thread.run_sync(synthesizer.synthesize, params)
    return JSONResponse(envelope.dump())


@router.get("/api/cms-proxy")
async def cms_proxy(request: Request):
    """
    Serve the catalog protocol from an upstream CMS API or the synthesized backend.

    `api` is either the upstream base URL (all other query parameters are
    forwarded) or the reserved synthesized-backend value.
    """
    api = (request.query_params.get(LOCATOR_PARAM) or "").strip()
    if not api:
        return _error(400, "缺少必要参数: api")
    try:
        if api == CMS_SYNTHESIZED_API:
            return await _handle_synthesized(request)
        return await _handle_forward(request, api)
    except Exception as exc:
        logger.error(f"CMS proxy failed: {exc}")
        return _error(500, "代理失败", details=str(exc))
