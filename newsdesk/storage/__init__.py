"""Result store.

This module provides:
- `ResultStore`: the protocol the resolver depends on
- `sqlalchemy`: SQLite persistence layer (tables, engine, repository)

Note: Domain models are in `newsdesk.data_models`.
"""

from .protocols import ResultStore
from .sqlalchemy import (
    Base,
    CachedSearchTable,
    SqlResultStore,
    create_session_maker,
    create_store_engine,
    create_tables,
)

__all__ = [
    "ResultStore",
    "Base",
    "CachedSearchTable",
    "SqlResultStore",
    "create_session_maker",
    "create_store_engine",
    "create_tables",
]
