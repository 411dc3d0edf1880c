from __future__ import annotations

from typing import List
from urllib.parse import quote, urlencode

from loguru import logger

from app.core.catalog.detail import DirectoryDetail, EpisodeRecord
from .client import OpenListClient, OpenListError, OpenListFile

VIDEO_EXTENSIONS = (
    ".mp4", ".mkv", ".avi", ".m3u8", ".flv", ".ts", ".mov", ".wmv", ".webm",
    ".rmvb", ".rm", ".mpg", ".mpeg", ".3gp", ".f4v", ".m4v", ".vob",
)


def is_video_file(item: OpenListFile) -> bool:
    """Visible, non-JSON files with a known video extension (case-insensitive)."""
    if item.is_dir or item.name.startswith(".") or item.name.endswith(".json"):
        return False
    return item.name.lower().endswith(VIDEO_EXTENSIONS)


def join_folder_path(root_path: str, folder_name: str) -> str:
    """
    Resolve a folder name against the library root.

    Indexes store `folderName` as the full path (root included); such names
    are used as-is and only relative names are joined onto `root_path`.
    """
    if folder_name.startswith("/"):
        return folder_name
    root = root_path or "/"
    return f"{root}{'' if root.endswith('/') else '/'}{folder_name}"


def build_play_url(base_url: str, folder_name: str, file_name: str) -> str:
    query = urlencode({"folder": folder_name, "fileName": file_name}, quote_via=quote)
    return f"{base_url.rstrip('/')}/api/openlist/play?{query}"


class OpenListDetailFetcher:
    """
    Directory detail lookup backed by an OpenList folder listing.

    Episodes are the folder's video files sorted by name and numbered by
    position; play URLs point at the media transport's play endpoint.
    """

    def __init__(self, client: OpenListClient, *, root_path: str, base_url: str) -> None:
        self.client = client
        self.root_path = root_path
        self.base_url = base_url

    def fetch(self, folder_name: str) -> DirectoryDetail:
        path = join_folder_path(self.root_path, folder_name)
        try:
            files = self.client.list_all(path)
        except OpenListError as exc:
            logger.warning("OpenList listing failed for {}: {}", path, exc)
            return DirectoryDetail(success=False, folder=folder_name, message=str(exc))
        videos = sorted((f for f in files if is_video_file(f)), key=lambda f: f.name)
        episodes: List[EpisodeRecord] = [
            EpisodeRecord(
                episode=idx,
                play_url=build_play_url(self.base_url, folder_name, f.name),
            )
            for idx, f in enumerate(videos, start=1)
        ]
        logger.debug("OpenList folder {} has {} episodes", folder_name, len(episodes))
        return DirectoryDetail(success=True, folder=folder_name, episodes=episodes)
