from .result_store import SqlResultStore

__all__ = ["SqlResultStore"]
