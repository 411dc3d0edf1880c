from app.core.catalog import (
    CatalogSynthesizer,
    DirectoryDetail,
    EpisodeRecord,
    tmdb_image_url,
)
from app.core.metainfo import MetaInfo


class _FakeFetcher:
    def __init__(self, detail=None, exc=None):
        self.detail = detail
        self.exc = exc
        self.calls = []

    def fetch(self, folder_name):
        self.calls.append(folder_name)
        if self.exc is not None:
            raise self.exc
        return self.detail


def _episodes(folder):
    return DirectoryDetail(
        success=True,
        folder=folder,
        episodes=[
            EpisodeRecord(episode=1, play_url="https://h/api/openlist/play?fileName=1.mp4"),
            EpisodeRecord(episode=2, play_url="https://h/api/openlist/play?fileName=2.mp4", title="Finale"),
        ],
    )


def _synth(metainfo_json, fetcher=None):
    meta = MetaInfo.from_json(metainfo_json)
    return CatalogSynthesizer(meta, fetcher or _FakeFetcher(), image_resolver=lambda p: f"img:{p or ''}")


def test_search_romance_returns_one_entry(metainfo_json):
    body = _synth(metainfo_json).synthesize({"wd": "romance"}).dump()
    assert body["code"] == 1
    assert body["msg"] == "数据列表"
    assert len(body["list"]) == 1
    assert body["list"][0]["vod_id"] == "romance"
    assert body["page"] == 1 and body["pagecount"] == 1
    assert body["limit"] == body["total"] == 1


def test_search_matches_case_insensitive_and_empty(metainfo_json):
    synth = _synth(metainfo_json)
    assert [e["vod_id"] for e in synth.search("HEIST").dump()["list"]] == ["heist"]
    empty = synth.search("nothing here").dump()
    assert empty["list"] == [] and empty["total"] == 0


def test_entry_mapping(metainfo_json):
    body = _synth(metainfo_json).listing().dump()
    by_id = {e["vod_id"]: e for e in body["list"]}
    assert list(by_id) == ["romance", "heist", "untitled"]
    assert by_id["romance"] == {
        "vod_id": "romance",
        "vod_name": "A Romance Story",
        "vod_pic": "img:/romance.jpg",
        "vod_remarks": "剧集",
        "vod_year": "2021",
        "type_name": "电视剧",
    }
    assert by_id["heist"]["type_name"] == "电影"
    assert by_id["heist"]["vod_remarks"] == "电影"
    assert by_id["heist"]["vod_year"] == "2019"
    assert by_id["untitled"]["vod_year"] == ""


def test_detail_unknown_id_is_code_zero(metainfo_json):
    fetcher = _FakeFetcher()
    body = _synth(metainfo_json, fetcher).synthesize({"ids": "nope"}).dump()
    assert body["code"] == 0
    assert body["list"] == []
    assert fetcher.calls == []


def test_detail_builds_playlist(metainfo_json):
    fetcher = _FakeFetcher(detail=_episodes("A Romance Story"))
    body = _synth(metainfo_json, fetcher).synthesize({"ids": "romance"}).dump()
    assert fetcher.calls == ["A Romance Story"]
    entry = body["list"][0]
    assert entry["vod_play_from"] == "OpenList"
    assert entry["vod_content"] == "Two people meet."
    assert entry["vod_play_url"] == (
        "第1集$https://h/api/openlist/play?fileName=1.mp4"
        "#Finale$https://h/api/openlist/play?fileName=2.mp4"
    )
    assert body["total"] == 1


def test_detail_fetcher_failure_is_code_zero(metainfo_json):
    failed = _FakeFetcher(detail=DirectoryDetail(success=False, folder="x", message="boom"))
    body = _synth(metainfo_json, failed).detail("romance").dump()
    assert body == {"code": 0, "msg": "获取详情失败", "list": []}

    raising = _FakeFetcher(exc=RuntimeError("network down"))
    body = _synth(metainfo_json, raising).detail("romance").dump()
    assert body["code"] == 0 and body["list"] == []


def test_wd_takes_priority_over_ids(metainfo_json):
    fetcher = _FakeFetcher(detail=_episodes("The Heist"))
    body = _synth(metainfo_json, fetcher).synthesize({"wd": "heist", "ids": "romance"}).dump()
    assert fetcher.calls == []
    assert body["list"][0]["vod_id"] == "heist"


def test_detail_by_search(metainfo_json):
    fetcher = _FakeFetcher(detail=_episodes("The Heist"))
    synth = _synth(metainfo_json, fetcher)
    body = synth.synthesize({"ac": "detail", "wd": "heist"}).dump()
    assert fetcher.calls == ["The Heist"]
    assert body["list"][0]["vod_play_from"] == "OpenList"

    miss = synth.synthesize({"ac": "detail", "wd": "zzz"}).dump()
    assert miss["code"] == 0


def test_tmdb_image_url():
    assert tmdb_image_url(None) == ""
    assert tmdb_image_url("") == ""
    assert tmdb_image_url("https://cdn/x.jpg") == "https://cdn/x.jpg"
    assert tmdb_image_url("/abc.jpg", size="w342") == "https://image.tmdb.org/t/p/w342/abc.jpg"


def test_listing_survives_numeric_poster_path():
    meta = MetaInfo.from_dict({"folders": {"x": {"title": "X", "poster_path": 42}}})
    body = CatalogSynthesizer(meta, _FakeFetcher()).listing().dump()
    assert body["list"][0]["vod_pic"].endswith("/42")
