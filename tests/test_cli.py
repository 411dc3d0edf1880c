def test_run_server_without_reload(monkeypatch):
    import uvicorn
    from app import cli

    captured = {}
    monkeypatch.delenv("VODBRIDGE_RELOAD", raising=False)
    monkeypatch.setattr(cli, "VODBRIDGE_RELOAD", False)
    monkeypatch.setattr(uvicorn, "run", lambda target, **kw: captured.update(target=target, **kw))

    sentinel = object()
    cli.run_server(sentinel)

    assert captured["target"] is sentinel
    assert captured["reload"] is False
    assert captured["port"] == cli.VODBRIDGE_PORT


def test_run_server_reload_uses_import_string(monkeypatch):
    import uvicorn
    from app import cli

    captured = {}
    monkeypatch.setenv("VODBRIDGE_RELOAD", "true")
    monkeypatch.setattr(uvicorn, "run", lambda target, **kw: captured.update(target=target, **kw))

    cli.run_server(object())

    assert captured["target"] == "app.main:app"
    assert captured["reload"] is True


def test_import_metainfo_stores_index(client, tmp_path, metainfo_json):
    from app import cli
    from app.core.metainfo import MetaInfoCache
    from app.db import SqlGlobalValueStore

    path = tmp_path / "metainfo.json"
    path.write_text(metainfo_json, encoding="utf-8")

    cli.main(["import-metainfo", str(path)])

    meta = MetaInfoCache(SqlGlobalValueStore).get()
    assert meta is not None and len(meta) == 3


def test_import_metainfo_rejects_invalid_file(client, tmp_path):
    import pytest
    from app import cli
    from app.db import SqlGlobalValueStore

    path = tmp_path / "broken.json"
    path.write_text('{"folders": []}', encoding="utf-8")

    with pytest.raises(SystemExit):
        cli.main(["import-metainfo", str(path)])
    assert SqlGlobalValueStore().get_global_value("video.metainfo") is None
