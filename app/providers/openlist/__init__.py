from .client import OpenListClient, OpenListError, OpenListFile, clear_token_cache
from .detail import OpenListDetailFetcher, build_play_url, is_video_file

__all__ = [
    "OpenListClient",
    "OpenListError",
    "OpenListFile",
    "clear_token_cache",
    "OpenListDetailFetcher",
    "build_play_url",
    "is_video_file",
]
