"""Request dispatch: cancellation tokens, the resolver and the worker pool."""

from .cancellation import CancellationToken
from .dispatcher import Dispatcher, SearchTask, WorkerState, build_request
from .resolver import CacheAsideResolver

__all__ = [
    "CacheAsideResolver",
    "CancellationToken",
    "Dispatcher",
    "SearchTask",
    "WorkerState",
    "build_request",
]
