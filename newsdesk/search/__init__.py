"""Search module for external news backends."""

from .newsapi import NewsAPIProvider
from .port import SearchProvider

__all__ = [
    "NewsAPIProvider",
    "SearchProvider",
]
