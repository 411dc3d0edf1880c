"""Database models for VODBridge.

Models:
    - GlobalValue: process-wide key/value settings (for example the
      serialized folder metadata index stored under ``video.metainfo``)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlmodel import Field, Session

from app.db.base import ModelBase


def utcnow() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class GlobalValue(ModelBase, table=True):
    key: str = Field(primary_key=True, index=True)
    value: str
    updated_at: datetime = Field(default_factory=utcnow, index=True)


def get_global_value(session: Session, key: str) -> Optional[str]:
    """
    Return the stored value for `key`, or `None` when it was never written.
    """
    logger.debug(f"Fetching global value for key={key}")
    rec = session.get(GlobalValue, key)
    if rec is None:
        logger.debug(f"No global value stored for key={key}")
        return None
    return rec.value


def set_global_value(session: Session, key: str, value: str) -> GlobalValue:
    """
    Insert or replace the value stored under `key`.

    Returns:
        GlobalValue: The persisted row refreshed from the database.
    """
    logger.debug(f"Upserting global value for key={key} ({len(value)} chars)")
    rec = session.get(GlobalValue, key)
    if rec is None:
        rec = GlobalValue(key=key, value=value)
    else:
        rec.value = value
        rec.updated_at = utcnow()
    session.add(rec)
    session.commit()
    session.refresh(rec)
    return rec


__all__ = [
    "GlobalValue",
    "get_global_value",
    "set_global_value",
    "utcnow",
]
