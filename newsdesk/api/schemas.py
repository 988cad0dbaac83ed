"""Request and response bodies of the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from newsdesk.data_models import ResultItem


class SearchBody(BaseModel):
    topic: str = Field(min_length=1)
    days: int = Field(ge=1)
    max_items: int = Field(ge=1)


class SearchResponse(BaseModel):
    topic: str
    provenance: Literal["cache", "provider"]
    items: list[ResultItem]


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    version: str
    workers: int
    idle_workers: int
    pending_tasks: int
    cached_records: int
