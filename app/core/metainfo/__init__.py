from .types import FolderInfo, MetaInfo
from .cache import METAINFO_CACHE, MetaInfoCache

__all__ = ["FolderInfo", "MetaInfo", "METAINFO_CACHE", "MetaInfoCache"]
