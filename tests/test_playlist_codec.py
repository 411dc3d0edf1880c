import pytest

from app.core.playlist import (
    M3u8ProxyRule,
    build_playlist,
    parse_episode,
    parse_playlist,
    rewrite_playlist,
    serialize_playlist,
)


def _identity(url: str, source: str) -> str:
    return url


def _proxy(url: str, source: str) -> str:
    if ".m3u8" not in url:
        return url
    return f"proxy://{source}/{url}"


@pytest.mark.parametrize(
    "doc",
    [
        "第01集$http://a/x.mp4#第02集$http://a/y.mp4",
        "http://a/bare.mp4",
        "正片$http://a/x.mp4$$$正片$http://b/x.mp4",
        "EP1$http://a/1.mp4$extra$more#EP2$http://a/2.mp4",
        "##第01集$ http://a/x.mp4 #",
        "$http://a/leading.mp4",
        "",
    ],
)
def test_rewrite_without_playable_urls_is_byte_exact(doc):
    rule = M3u8ProxyRule("https://p", token="")
    assert rewrite_playlist(doc, "CMS1", rule) == doc


def test_title_preserved_and_url_encoded():
    rule = M3u8ProxyRule("https://p", token="")
    out = rewrite_playlist("第01集$http://a/x.m3u8", "CMS1", rule)
    assert out == (
        "第01集$https://p/api/proxy-m3u8?url=http%3A%2F%2Fa%2Fx.m3u8&source=CMS1"
    )


def test_two_episode_document_keeps_delimiter():
    rule = M3u8ProxyRule("https://p", token="")
    out = rewrite_playlist(
        "第01集$http://a/x.m3u8#第02集$http://a/y.m3u8", "CMS1", rule
    )
    first, second = out.split("#")
    assert first.startswith("第01集$https://p/api/proxy-m3u8?url=")
    assert first.endswith("&source=CMS1")
    assert second.startswith("第02集$https://p/api/proxy-m3u8?url=")
    assert "y.m3u8" in second and second.endswith("&source=CMS1")


def test_extra_survives_rewrite_byte_exact():
    out = rewrite_playlist("EP1$http://a/x.m3u8$$opaque$ $x", "S", _proxy)
    assert out == "EP1$proxy://S/http://a/x.m3u8$$opaque$ $x"


def test_extra_survives_when_url_not_playable():
    doc = "EP1$http://a/x.mp4$720p$zh"
    assert rewrite_playlist(doc, "S", _proxy) == doc


def test_identity_rule_twice_returns_original():
    doc = "第01集$http://a/x.m3u8$e#http://b/y.m3u8$$$片$ http://c/z.m3u8 "
    once = rewrite_playlist(doc, "S", _identity)
    assert rewrite_playlist(once, "S2", _identity) == doc


def test_first_delimiter_is_title_boundary():
    ep = parse_episode("Title$http://a/x$y$z")
    assert ep.title == "Title"
    assert ep.url == "http://a/x"
    assert ep.extra == "$y$z"


def test_bare_and_blank_episodes():
    bare = parse_episode("http://a/x.m3u8")
    assert bare.is_bare and bare.title is None
    blank = parse_episode("  ")
    assert blank.is_blank
    out = rewrite_playlist("http://a/x.m3u8#  #", "S", _proxy)
    assert out == "proxy://S/http://a/x.m3u8#  #"


def test_url_is_stripped_before_rule():
    seen = []

    def _record(url, source):
        seen.append(url)
        return url

    rewrite_playlist("EP$  http://a/x.m3u8  ", "S", _record)
    assert seen == ["http://a/x.m3u8"]


def test_failing_episode_is_isolated():
    def _boom(url, source):
        if "bad" in url:
            raise RuntimeError("cannot rewrite")
        return _proxy(url, source)

    doc = "A$http://a/bad.m3u8#B$http://a/good.m3u8$$$C$http://c/bad.m3u8$x"
    out = rewrite_playlist(doc, "S", _boom)
    assert out == (
        "A$http://a/bad.m3u8#B$proxy://S/http://a/good.m3u8$$$C$http://c/bad.m3u8$x"
    )


def test_parse_and_serialize_structure():
    doc = "a$1#b$2$$$c$3"
    parsed = parse_playlist(doc)
    assert len(parsed.sources) == 2
    assert [ep.title for ep in parsed.episodes()] == ["a", "b", "c"]
    assert serialize_playlist(parsed) == doc


def test_build_playlist():
    assert build_playlist([("第1集", "http://x/1"), ("第2集", "http://x/2")]) == (
        "第1集$http://x/1#第2集$http://x/2"
    )
    assert build_playlist([]) == ""
