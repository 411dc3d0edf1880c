from __future__ import annotations

from dataclasses import dataclass
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

import requests
from loguru import logger

from app.config import OPENLIST_PAGE_SIZE, OPENLIST_TOKEN_TTL_SECONDS
from app.utils.http_client import post as http_post


class OpenListError(Exception):
    """Raised when the OpenList API cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass
class OpenListFile:
    name: str
    size: int = 0
    is_dir: bool = False
    modified: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OpenListFile":
        return cls(
            name=str(data.get("name") or ""),
            size=int(data.get("size") or 0),
            is_dir=bool(data.get("is_dir")),
            modified=str(data.get("modified") or ""),
        )


# (base_url, username) -> (token, expires_at)
_TOKEN_CACHE: Dict[Tuple[str, str], Tuple[str, float]] = {}
_TOKEN_LOCK = threading.Lock()


def clear_token_cache() -> None:
    with _TOKEN_LOCK:
        _TOKEN_CACHE.clear()


class OpenListClient:
    """Minimal client for the OpenList (AList compatible) file-system API."""

    def __init__(self, base_url: str, username: str, password: str) -> None:
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password

    @property
    def _cache_key(self) -> Tuple[str, str]:
        return (self.base_url, self.username)

    def login(self) -> str:
        """
        Log in with username/password and return a fresh API token.

        Raises:
            OpenListError: On transport errors, non-2xx responses or a missing token.
        """
        logger.debug("OpenList login at {}", self.base_url)
        try:
            resp = http_post(
                f"{self.base_url}/api/auth/login",
                json={"username": self.username, "password": self.password},
            )
        except requests.RequestException as exc:
            raise OpenListError(f"OpenList login failed: {exc}") from exc
        if not resp.ok:
            raise OpenListError(
                f"OpenList login failed: {resp.status_code}", status=resp.status_code
            )
        data = resp.json()
        token = (data.get("data") or {}).get("token") if data.get("code") == 200 else None
        if not token:
            raise OpenListError("OpenList login failed: no token returned")
        return token

    def _token(self) -> str:
        now = time.time()
        with _TOKEN_LOCK:
            cached = _TOKEN_CACHE.get(self._cache_key)
        if cached and cached[1] > now:
            return cached[0]
        logger.info("OpenList token missing or expired; logging in again.")
        token = self.login()
        with _TOKEN_LOCK:
            _TOKEN_CACHE[self._cache_key] = (token, now + OPENLIST_TOKEN_TTL_SECONDS)
        return token

    def _invalidate_token(self) -> None:
        with _TOKEN_LOCK:
            _TOKEN_CACHE.pop(self._cache_key, None)
        logger.debug("OpenList token cache cleared.")

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST an authenticated API call.

        An expired token (HTTP 401, or HTTP 200 with body code 401) clears the
        cached token and repeats the call once with a new login.
        """
        for attempt in range(2):
            headers = {"Authorization": self._token(), "Content-Type": "application/json"}
            try:
                resp = http_post(f"{self.base_url}{path}", json=payload, headers=headers)
            except requests.RequestException as exc:
                raise OpenListError(f"OpenList request failed: {exc}") from exc
            if resp.status_code == 401 and attempt == 0:
                self._invalidate_token()
                continue
            if not resp.ok:
                raise OpenListError(
                    f"OpenList API error: {resp.status_code}", status=resp.status_code
                )
            try:
                data = resp.json()
            except ValueError as exc:
                raise OpenListError("OpenList returned invalid JSON") from exc
            if data.get("code") == 401 and attempt == 0:
                self._invalidate_token()
                continue
            return data
        raise OpenListError("OpenList authentication failed", status=401)

    def list_directory(
        self,
        path: str,
        page: int = 1,
        per_page: int = OPENLIST_PAGE_SIZE,
        refresh: bool = False,
    ) -> Tuple[List[OpenListFile], int]:
        """
        List one page of a directory.

        Returns:
            tuple[list[OpenListFile], int]: The page's entries and the directory's total entry count.

        Raises:
            OpenListError: When the API answers with a non-200 body code.
        """
        logger.debug("OpenList list {} (page={}, per_page={})", path, page, per_page)
        data = self._post(
            "/api/fs/list",
            {
                "path": path,
                "password": "",
                "refresh": refresh,
                "page": page,
                "per_page": per_page,
            },
        )
        if data.get("code") != 200:
            raise OpenListError(
                f"OpenList list failed for {path}: {data.get('message') or data.get('code')}"
            )
        body = data.get("data") or {}
        content = [OpenListFile.from_dict(item) for item in body.get("content") or []]
        return content, int(body.get("total") or 0)

    def list_all(self, path: str, per_page: int = OPENLIST_PAGE_SIZE) -> List[OpenListFile]:
        """Collect every page of a directory listing."""
        files: List[OpenListFile] = []
        page = 1
        while True:
            content, total = self.list_directory(path, page=page, per_page=per_page)
            files.extend(content)
            if not content or len(files) >= total:
                break
            page += 1
        logger.debug("OpenList listed {} entries under {}", len(files), path)
        return files
