from __future__ import annotations

from typing import Optional

from app.config import TMDB_IMAGE_BASE_URL, TMDB_IMAGE_SIZE


def tmdb_image_url(path: Optional[str], size: Optional[str] = None) -> str:
    """
    Resolve a TMDB poster path to a displayable URL.

    Empty paths resolve to an empty string and absolute http(s) URLs are
    returned unchanged.
    """
    if not path:
        return ""
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return f"{TMDB_IMAGE_BASE_URL}/t/p/{size or TMDB_IMAGE_SIZE}{path}"
