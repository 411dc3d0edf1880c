from .types import (
    EPISODE_DELIMITER,
    FIELD_DELIMITER,
    SOURCE_DELIMITER,
    PlaylistDocument,
    PlaylistEpisode,
    PlaylistSource,
)
from .codec import (
    RewriteRule,
    build_playlist,
    parse_episode,
    parse_playlist,
    rewrite_document,
    rewrite_playlist,
    serialize_playlist,
)
from .urls import (
    M3u8ProxyRule,
    build_m3u8_proxy_url,
    is_playable_url,
    resolve_request_origin,
)

__all__ = [
    "EPISODE_DELIMITER",
    "FIELD_DELIMITER",
    "SOURCE_DELIMITER",
    "PlaylistDocument",
    "PlaylistEpisode",
    "PlaylistSource",
    "RewriteRule",
    "build_playlist",
    "parse_episode",
    "parse_playlist",
    "rewrite_document",
    "rewrite_playlist",
    "serialize_playlist",
    "M3u8ProxyRule",
    "build_m3u8_proxy_url",
    "is_playable_url",
    "resolve_request_origin",
]
