from __future__ import annotations

from contextlib import asynccontextmanager

from loguru import logger
from fastapi import FastAPI

from app.config import get_openlist_config
from app.db import create_db_and_tables, dispose_engine
from app.utils.logger import config as configure_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logger()
    logger.info("Application startup: creating DB tables.")
    create_db_and_tables()
    if get_openlist_config() is None:
        logger.warning("OpenList backend not configured; synthesized catalog will be empty.")
    else:
        logger.info("OpenList backend configured.")

    try:
        yield
    finally:
        try:
            dispose_engine()
        except Exception as e:
            logger.warning(f"dispose_engine failed: {e}")
        logger.info("Application shutdown complete.")
