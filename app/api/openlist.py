from __future__ import annotations

import anyio
from fastapi import APIRouter, HTTPException, Request
from loguru import logger

from app.config import get_openlist_config
from app.core.playlist import resolve_request_origin
from app.providers import get_detail_fetcher

router = APIRouter(prefix="/api/openlist")


@router.get("/detail")
async def openlist_detail(request: Request, folder: str = ""):
    """
    List the episodes of one library folder with their play URLs.
    """
    folder = folder.strip()
    if not folder:
        raise HTTPException(status_code=400, detail="missing folder")
    config = get_openlist_config()
    if config is None:
        raise HTTPException(status_code=400, detail="OpenList not configured")

    fetcher = get_detail_fetcher(resolve_request_origin(request.headers), config)
    detail = await anyio.to_thread.run_sync(fetcher.fetch, folder)
    if not detail.success:
        logger.error("OpenList detail failed for {}: {}", folder, detail.message)
        raise HTTPException(status_code=500, detail="OpenList listing failed")
    return {
        "success": True,
        "folder": detail.folder,
        "episodes": [ep.to_dict() for ep in detail.episodes],
    }
