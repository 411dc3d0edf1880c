import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

_OPENLIST_ENV = (
    "OPENLIST_ENABLED",
    "OPENLIST_URL",
    "OPENLIST_USERNAME",
    "OPENLIST_PASSWORD",
    "OPENLIST_ROOT_PATH",
)


@pytest.fixture
def client(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    # Keep a developer's .env / shell from leaking into the synthesized backend
    for name in _OPENLIST_ENV + ("SITE_BASE", "PROXY_M3U8_TOKEN", "NEXT_PUBLIC_PROXY_M3U8_TOKEN"):
        monkeypatch.setenv(name, "")

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    # Re-import everything so module constants pick up the env above
    for m in [m for m in sys.modules if m == "app" or m.startswith("app.")]:
        del sys.modules[m]

    from app.main import app
    from app.db import create_db_and_tables

    create_db_and_tables()

    with TestClient(app) as c:
        yield c


@pytest.fixture
def metainfo_json():
    import json

    return json.dumps(
        {
            "folders": {
                "romance": {
                    "folderName": "A Romance Story",
                    "title": "A Romance Story",
                    "poster_path": "/romance.jpg",
                    "overview": "Two people meet.",
                    "media_type": "tv",
                    "release_date": "2021-04-02",
                },
                "heist": {
                    "folderName": "The Heist",
                    "title": "The Heist",
                    "poster_path": None,
                    "overview": "A bank job.",
                    "media_type": "movie",
                    "release_date": "2019-11-20",
                },
                "untitled": {
                    "folderName": "untitled",
                    "title": "Untitled Project",
                },
            }
        }
    )
