"""Search request and result models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from newsdesk.exceptions import NewsdeskError


class SearchRequest(BaseModel):
    """Topic plus the scope (recency window, item cap) a caller wants."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(min_length=1)
    days: int = Field(ge=1)
    max_items: int = Field(ge=1)


class ResultItem(BaseModel):
    """A single article as returned to callers."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class CacheRecord(BaseModel):
    """A stored article tagged with the scope of the fetch that produced it."""

    model_config = ConfigDict(frozen=True)

    topic: str
    days: int
    max_items: int
    title: str
    url: str
    fetched_at: datetime

    def to_item(self) -> ResultItem:
        return ResultItem(title=self.title, url=self.url)


@dataclass(frozen=True)
class ScopeCoverage:
    """Largest recency window and item cap ever stored for a topic.

    Both maxima are computed independently and need not come from the same
    record. An unseen topic has coverage (0, 0).
    """

    days: int = 0
    max_items: int = 0

    def covers(self, request: SearchRequest) -> bool:
        return self.days >= request.days and self.max_items >= request.max_items


class Provenance(str, Enum):
    """Where the items of a TaskResult came from."""

    FROM_CACHE = "cache"
    FROM_PROVIDER = "provider"

    @property
    def label(self) -> str:
        """Short label used in batch output files."""
        return "DB" if self is Provenance.FROM_CACHE else "API"


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one search task; exactly one exists per submitted request."""

    items: tuple[ResultItem, ...] = ()
    provenance: Provenance | None = None
    error: NewsdeskError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls, items: list[ResultItem], provenance: Provenance
    ) -> TaskResult:
        return cls(items=tuple(items), provenance=provenance)

    @classmethod
    def failure(cls, error: NewsdeskError) -> TaskResult:
        return cls(error=error)
