"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - create_tables(): Schema bootstrap for development and tests

Models and CRUD singletons are imported from their subpackages:
  i18n_backend.boundary.db.models, i18n_backend.boundary.db.CRUD

Dependencies: sqlalchemy, i18n_backend.configs
System role: Database adapter for the job ledger, item tracker and translation store
"""

from i18n_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from i18n_backend.boundary.db.connection import (
    build_async_engine,
    create_session_factory,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from i18n_backend.boundary.db.create_tables import create_tables

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "build_async_engine",
    "create_session_factory",
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
