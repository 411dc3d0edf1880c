from __future__ import annotations

from typing import Any, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from loguru import logger

from app.config import CMS_PROXY_USER_AGENT
from app.utils.logger import config as configure_logger

configure_logger()

_SESSION: Optional[requests.Session] = None


def _build_session() -> requests.Session:
    s = requests.Session()
    # Refused connections are retried for any method (nothing was sent);
    # read errors never are, and 5xx only for GET/HEAD.
    retry = Retry(
        total=2,
        connect=2,
        read=0,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=20)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({"User-Agent": CMS_PROXY_USER_AGENT})
    logger.debug("HTTP client session created.")
    return s


def get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_session()
    return _SESSION


def post(url: str, *, timeout: float | int = 30, **kwargs: Any) -> requests.Response:
    return get_session().post(url, timeout=timeout, **kwargs)
