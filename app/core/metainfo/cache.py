from __future__ import annotations

from typing import Callable, Optional

from loguru import logger

from app.config import METAINFO_KEY
from app.db.store import GlobalValueStore, SqlGlobalValueStore
from .types import MetaInfo


class MetaInfoCache:
    """
    Process-lifetime cache slot for the folder metadata index.

    The slot has no TTL and no lock: concurrent first reads may each load
    from the store and overwrite the slot with equivalent data. Only the
    owning configuration flow (or a test) clears it via `reset()`.
    """

    def __init__(
        self,
        store_factory: Callable[[], GlobalValueStore],
        key: str = METAINFO_KEY,
    ) -> None:
        """
        Parameters:
            store_factory: Returns the store to load from; called once per cache miss.
            key: Global key holding the serialized MetaInfo.
        """
        self._store_factory = store_factory
        self._key = key
        self._value: Optional[MetaInfo] = None

    def get(self) -> Optional[MetaInfo]:
        """
        Return the cached MetaInfo, loading it once from the store on a miss.

        Returns:
            MetaInfo | None: `None` when nothing is stored or the stored value
            cannot be read or decoded; nothing is cached in that case.
        """
        if self._value is not None:
            logger.trace("MetaInfo cache hit")
            return self._value
        logger.debug("MetaInfo cache miss; loading {}", self._key)
        loaded = self._load()
        if loaded is not None:
            self._value = loaded
        return loaded

    def _load(self) -> Optional[MetaInfo]:
        try:
            raw = self._store_factory().get_global_value(self._key)
        except Exception as exc:
            logger.warning("MetaInfo lookup failed for {}: {}", self._key, exc)
            return None
        if not raw:
            logger.debug("No MetaInfo stored under {}", self._key)
            return None
        try:
            meta = MetaInfo.from_json(raw)
        except (ValueError, TypeError) as exc:
            logger.warning("Stored MetaInfo under {} is invalid: {}", self._key, exc)
            return None
        logger.info("Loaded MetaInfo with {} folders", len(meta))
        return meta

    def set(self, meta: MetaInfo) -> None:
        self._value = meta

    def reset(self) -> None:
        logger.debug("MetaInfo cache reset")
        self._value = None


METAINFO_CACHE = MetaInfoCache(SqlGlobalValueStore)
