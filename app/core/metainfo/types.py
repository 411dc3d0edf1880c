from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

MediaType = Literal["movie", "tv"]


@dataclass(frozen=True)
class FolderInfo:
    """
    Metadata of one library folder as stored in the metadata index.
    """

    folderName: str
    title: str
    poster_path: Optional[str] = None
    overview: str = ""
    media_type: str = "tv"
    release_date: str = ""

    @property
    def is_movie(self) -> bool:
        return self.media_type == "movie"

    @property
    def year(self) -> str:
        """Four-digit year prefix of `release_date`, or an empty string."""
        if not self.release_date:
            return ""
        return self.release_date.split("-")[0] or ""

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any]) -> "FolderInfo":
        """
        Build a FolderInfo from a stored folder record, ignoring unknown fields.

        Raises:
            ValueError: If the record is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"folder {key!r} is not an object")
        folder_name = str(data.get("folderName") or key)
        return cls(
            folderName=folder_name,
            title=str(data.get("title") or folder_name),
            poster_path=str(data.get("poster_path") or "") or None,
            overview=str(data.get("overview") or ""),
            media_type=str(data.get("media_type") or "tv"),
            release_date=str(data.get("release_date") or ""),
        )


@dataclass(frozen=True)
class MetaInfo:
    """Folder-keyed metadata index; `folders` keeps the stored insertion order."""

    folders: dict[str, FolderInfo] = field(default_factory=dict)

    def get(self, key: str) -> Optional[FolderInfo]:
        return self.folders.get(key)

    def __len__(self) -> int:
        return len(self.folders)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MetaInfo":
        """
        Raises:
            ValueError: If `folders` is missing or not an object.
        """
        raw = data.get("folders") if isinstance(data, Mapping) else None
        if not isinstance(raw, Mapping):
            raise ValueError("metainfo has no folders object")
        return cls(
            folders={
                str(key): FolderInfo.from_dict(str(key), value)
                for key, value in raw.items()
            }
        )

    @classmethod
    def from_json(cls, text: str) -> "MetaInfo":
        return cls.from_dict(json.loads(text))
