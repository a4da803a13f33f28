"""SQLAlchemy adapter package for profilesync."""

from __future__ import annotations

from .gateway import SqlAlchemyProfileGateway
from .lifecycle import (
    StartupError,
    build_gateway,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from .mappings import (
    ORDER_COLUMN_BY_COLLECTION,
    TABLE_BY_COLLECTION,
    create_all_tables,
    metadata,
)

__all__ = [
    "ORDER_COLUMN_BY_COLLECTION",
    "TABLE_BY_COLLECTION",
    "SqlAlchemyProfileGateway",
    "StartupError",
    "build_gateway",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
