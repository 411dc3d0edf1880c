from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

SOURCE_DELIMITER = "$$$"
EPISODE_DELIMITER = "#"
FIELD_DELIMITER = "$"


@dataclass(frozen=True)
class PlaylistEpisode:
    """
    One `#`-separated item of a playlist source.

    `url` keeps the raw URL segment (surrounding whitespace included) and
    `extra` keeps everything from the second field delimiter on, delimiter
    included. A bare episode has no title; a blank one has neither title nor
    URL and is re-emitted from `raw`.
    """

    raw: str
    title: Optional[str] = None
    url: Optional[str] = None
    extra: str = ""

    @property
    def is_blank(self) -> bool:
        return self.url is None

    @property
    def is_bare(self) -> bool:
        return self.url is not None and self.title is None

    def with_url(self, url: str) -> "PlaylistEpisode":
        """Return a copy of this episode pointing at `url`, Title/Extra untouched."""
        if self.is_blank:
            return self
        if self.title is None:
            text = url
        else:
            text = f"{self.title}{FIELD_DELIMITER}{url}{self.extra}"
        return PlaylistEpisode(raw=text, title=self.title, url=url, extra=self.extra)


@dataclass(frozen=True)
class PlaylistSource:
    episodes: tuple[PlaylistEpisode, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlaylistDocument:
    sources: tuple[PlaylistSource, ...] = field(default_factory=tuple)

    def episodes(self) -> list[PlaylistEpisode]:
        return [ep for src in self.sources for ep in src.episodes]
