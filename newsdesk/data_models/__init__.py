"""Domain models for search requests, cached records and task outcomes."""

from .search import (
    CacheRecord,
    Provenance,
    ResultItem,
    ScopeCoverage,
    SearchRequest,
    TaskResult,
)

__all__ = [
    "CacheRecord",
    "Provenance",
    "ResultItem",
    "ScopeCoverage",
    "SearchRequest",
    "TaskResult",
]
