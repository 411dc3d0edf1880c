from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware


def parse_origins(raw: str) -> list[str]:
    """Split a comma-separated origin list, dropping blanks and duplicates."""
    return list(dict.fromkeys(o.strip().rstrip("/") for o in raw.split(",") if o.strip()))


def apply_cors_middleware(
    app: FastAPI,
    *,
    origins: list[str],
    allow_credentials: bool,
) -> None:
    """Let browser-based players read the catalog endpoints cross-origin.

    - No middleware if origins is empty.
    - Wildcard origins ("*") always disable credentials.
    - Only read methods are allowed; the catalog surface is GET-only.
    """

    if not origins:
        return

    is_wildcard = "*" in origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if is_wildcard else origins,
        allow_credentials=False if is_wildcard else allow_credentials,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )
