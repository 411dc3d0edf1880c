"""SQLite engine for the global key/value store under DATA_DIR."""

from loguru import logger
from sqlmodel import create_engine
from sqlalchemy.pool import NullPool

from app.config import DATA_DIR
from app.db.base import ModelBase

DATABASE_URL = f"sqlite:///{(DATA_DIR / 'vodbridge.db').as_posix()}"
logger.debug(f"DATABASE_URL: {DATABASE_URL}")

# Store lookups run in worker threads (anyio.to_thread), so the connection
# must not be pinned to its creating thread; NullPool closes it per session.
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=NullPool,
    echo=False,
)


def create_db_and_tables() -> None:
    from app.db import models  # noqa: F401  registers GlobalValue

    ModelBase.metadata.create_all(engine)
    logger.success(f"Database ready at {DATA_DIR / 'vodbridge.db'}")


def dispose_engine() -> None:
    try:
        engine.dispose()
        logger.debug("SQLAlchemy engine disposed.")
    except Exception as e:
        logger.warning(f"Engine dispose error: {e}")


__all__ = [
    "engine",
    "dispose_engine",
    "create_db_and_tables",
    "DATABASE_URL",
]
