"""Declarative base shared by the VODBridge table models."""

from sqlmodel import SQLModel
from sqlalchemy.orm import registry as sa_registry

# Fresh registry per import: tests purge and re-import app.* modules, and the
# default SQLModel registry would then see GlobalValue declared twice.
_registry = sa_registry()


class ModelBase(SQLModel, registry=_registry):  # type: ignore[call-arg]
    pass


__all__ = ["ModelBase"]
