import app.core.playlist.urls as urls
from app.core.playlist import M3u8ProxyRule, build_m3u8_proxy_url, resolve_request_origin


def test_token_parameter_appended():
    out = build_m3u8_proxy_url(
        "https://cdn/x.m3u8?a=1&b=2", origin="https://p/", source="源 1", token="t0k"
    )
    assert out == (
        "https://p/api/proxy-m3u8?url=https%3A%2F%2Fcdn%2Fx.m3u8%3Fa%3D1%26b%3D2"
        "&source=%E6%BA%90%201&token=t0k"
    )


def test_configured_token_used_by_default(monkeypatch):
    monkeypatch.setattr(urls, "PROXY_M3U8_TOKEN", "secret")
    out = build_m3u8_proxy_url("http://a/x.m3u8", origin="https://p")
    assert out.endswith("&token=secret")
    assert "source=" not in out


def test_rule_passes_other_urls_through():
    rule = M3u8ProxyRule("https://p", token="")
    assert rule("http://a/x.mp4", "S") == "http://a/x.mp4"
    assert rule("", "S") == ""
    assert rule("http://a/x.m3u8", "").startswith("https://p/api/proxy-m3u8?url=")


def test_origin_prefers_site_base(monkeypatch):
    monkeypatch.setattr(urls, "SITE_BASE", "https://tv.example.com/")
    assert resolve_request_origin({"host": "other:8000"}) == "https://tv.example.com"


def test_origin_from_forwarded_headers(monkeypatch):
    monkeypatch.setattr(urls, "SITE_BASE", "")
    headers = {"host": "tv.example.com", "x-forwarded-proto": "http"}
    assert resolve_request_origin(headers) == "http://tv.example.com"
    assert resolve_request_origin({"x-forwarded-host": "edge.example.com"}) == (
        "https://edge.example.com"
    )


def test_origin_loopback_defaults_to_http(monkeypatch):
    monkeypatch.setattr(urls, "SITE_BASE", "")
    assert resolve_request_origin({"host": "localhost:3000"}) == "http://localhost:3000"
    assert resolve_request_origin({"host": "127.0.0.1:8000"}) == "http://127.0.0.1:8000"
    assert resolve_request_origin({"host": "media.example.com"}) == (
        "https://media.example.com"
    )
