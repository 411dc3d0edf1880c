"""Global value stores consumed by the metadata index cache.

The cache only reads, so a store only has to provide ``get_global_value``.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from loguru import logger
from sqlmodel import Session

from app.db.models import get_global_value, set_global_value


@runtime_checkable
class GlobalValueStore(Protocol):
    def get_global_value(self, key: str) -> Optional[str]: ...


class SqlGlobalValueStore:
    """GlobalValueStore backed by the SQLite ``globalvalue`` table."""

    def __init__(self, engine=None) -> None:
        self._engine = engine

    def _get_engine(self):
        if self._engine is not None:
            return self._engine
        from app.db.session import engine

        return engine

    def get_global_value(self, key: str) -> Optional[str]:
        with Session(self._get_engine()) as s:
            return get_global_value(s, key)

    def set_global_value(self, key: str, value: str) -> None:
        with Session(self._get_engine()) as s:
            set_global_value(s, key, value)
        logger.info(f"Stored global value {key}")


__all__ = ["GlobalValueStore", "SqlGlobalValueStore"]
