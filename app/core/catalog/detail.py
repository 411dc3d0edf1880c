from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol


@dataclass(frozen=True)
class EpisodeRecord:
    episode: int
    play_url: str
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        """Explicit title, else `第{n}集`."""
        return self.title or f"第{self.episode}集"

    def to_dict(self) -> dict:
        return {"episode": self.episode, "title": self.display_title, "playUrl": self.play_url}


@dataclass(frozen=True)
class DirectoryDetail:
    success: bool
    folder: str
    episodes: list[EpisodeRecord] = field(default_factory=list)
    message: Optional[str] = None


class DirectoryDetailFetcher(Protocol):
    """Looks up the ordered episodes of one library folder by folder name."""

    def fetch(self, folder_name: str) -> DirectoryDetail: ...


# Maps a raw poster path to a displayable image URL.
ImageResolver = Callable[[Optional[str]], str]
