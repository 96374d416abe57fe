"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.
Production schemas are expected to be managed by migrations; this is for
development databases and tests.

Dependencies: sqlalchemy, i18n_backend.configs
System role: Database schema initialization

Usage:
    python -m i18n_backend.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from i18n_backend.boundary.db.base import Base
from i18n_backend.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from i18n_backend.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Target engine (defaults to the process-wide engine)

    Raises:
        SQLAlchemyError: If the connection or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


async def drop_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Database tables dropped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_tables())
