"""SQLAlchemy persistence layer for the result store."""

from .base import Base
from .engine import create_session_maker, create_store_engine, create_tables
from .repositories import SqlResultStore
from .tables import CachedSearchTable

__all__ = [
    # Engine
    "create_session_maker",
    "create_store_engine",
    "create_tables",
    # Tables
    "Base",
    "CachedSearchTable",
    # Repositories
    "SqlResultStore",
]
