"""Database package: SQLModel models, engine, and CRUD helpers.

Key modules:
    - base: ModelBase class for all table models
    - session: Database engine and session management
    - models: Table models (GlobalValue) and CRUD functions
    - store: GlobalValueStore implementations used by the metadata cache
"""

from .base import ModelBase
from .session import (
    engine,
    dispose_engine,
    create_db_and_tables,
    DATABASE_URL,
)
from .models import (
    GlobalValue,
    get_global_value,
    set_global_value,
)
from .store import GlobalValueStore, SqlGlobalValueStore

__all__ = [
    "ModelBase",
    "engine",
    "dispose_engine",
    "create_db_and_tables",
    "DATABASE_URL",
    "GlobalValue",
    "get_global_value",
    "set_global_value",
    "GlobalValueStore",
    "SqlGlobalValueStore",
]
