from __future__ import annotations

from typing import Mapping, Optional

from loguru import logger

from app.core.metainfo import FolderInfo, MetaInfo
from app.core.playlist import build_playlist
from .detail import DirectoryDetailFetcher, ImageResolver
from .images import tmdb_image_url
from .models import CatalogEntry, CatalogEnvelope

PLAY_FROM = "OpenList"

MSG_NOT_FOUND = "视频不存在"
MSG_DETAIL_FAILED = "获取详情失败"


def _type_name(info: FolderInfo) -> str:
    return "电影" if info.is_movie else "电视剧"


def _remarks(info: FolderInfo) -> str:
    return "电影" if info.is_movie else "剧集"


def _matches(info: FolderInfo, needle: str) -> bool:
    return needle in info.title.lower() or needle in info.folderName.lower()


class CatalogSynthesizer:
    """
    Serves the catalog protocol from the folder metadata index.

    Search, listing and detail envelopes always report a single page. Detail
    play data comes from the directory detail fetcher; any failure there is
    reported as an empty result rather than an error.
    """

    def __init__(
        self,
        meta: MetaInfo,
        detail_fetcher: DirectoryDetailFetcher,
        image_resolver: ImageResolver = tmdb_image_url,
    ) -> None:
        self.meta = meta
        self.detail_fetcher = detail_fetcher
        self.image_resolver = image_resolver

    def _entry(self, key: str, info: FolderInfo) -> CatalogEntry:
        return CatalogEntry(
            vod_id=key,
            vod_name=info.title,
            vod_pic=self.image_resolver(info.poster_path),
            vod_remarks=_remarks(info),
            vod_year=info.year,
            type_name=_type_name(info),
        )

    def _find(self, keyword: str) -> list[tuple[str, FolderInfo]]:
        needle = keyword.lower()
        return [
            (key, info)
            for key, info in self.meta.folders.items()
            if _matches(info, needle)
        ]

    def search(self, keyword: str) -> CatalogEnvelope:
        """Case-insensitive substring match on title and folder name, in index order."""
        hits = self._find(keyword)
        logger.debug("Catalog search '{}' matched {} folders", keyword, len(hits))
        return CatalogEnvelope.listing([self._entry(k, info) for k, info in hits])

    def listing(self) -> CatalogEnvelope:
        return CatalogEnvelope.listing(
            [self._entry(k, info) for k, info in self.meta.folders.items()]
        )

    def detail(self, folder_key: str) -> CatalogEnvelope:
        """
        Build the detail envelope of one folder, including its playlist.

        Returns:
            CatalogEnvelope: One entry with play data, or a `code=0` envelope
            when the id is unknown or the episode lookup fails.
        """
        info = self.meta.get(folder_key)
        if info is None:
            logger.info("Catalog detail: unknown id {}", folder_key)
            return CatalogEnvelope.empty(MSG_NOT_FOUND)
        try:
            detail = self.detail_fetcher.fetch(info.folderName)
        except Exception as exc:
            logger.error("Directory detail lookup failed for {}: {}", info.folderName, exc)
            return CatalogEnvelope.empty(MSG_DETAIL_FAILED)
        if not detail.success:
            logger.warning(
                "Directory detail lookup unsuccessful for {}: {}",
                info.folderName,
                detail.message or "<no message>",
            )
            return CatalogEnvelope.empty(MSG_DETAIL_FAILED)

        play_url = build_playlist(
            (ep.display_title, ep.play_url) for ep in detail.episodes
        )
        entry = self._entry(folder_key, info)
        entry.vod_content = info.overview
        entry.vod_play_from = PLAY_FROM
        entry.vod_play_url = play_url
        logger.success(
            "Catalog detail for {} with {} episodes", folder_key, len(detail.episodes)
        )
        return CatalogEnvelope.listing([entry])

    def detail_by_search(self, keyword: str) -> CatalogEnvelope:
        """Detail envelope of the first folder matching `keyword`."""
        hits = self._find(keyword)
        if not hits:
            return CatalogEnvelope.empty(MSG_NOT_FOUND)
        return self.detail(hits[0][0])

    def synthesize(self, params: Mapping[str, str]) -> CatalogEnvelope:
        """
        Dispatch on query parameters: `wd` search, then `ids` detail, else listing.

        `ac=detail` together with `wd` resolves the first search hit to its detail.
        """
        wd: Optional[str] = params.get("wd")
        ids: Optional[str] = params.get("ids")
        if wd:
            if params.get("ac") == "detail":
                return self.detail_by_search(wd)
            return self.search(wd)
        if ids:
            return self.detail(ids)
        return self.listing()
