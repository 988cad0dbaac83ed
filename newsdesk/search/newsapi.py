from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, Field, ValidationError

from newsdesk.data_models import ResultItem, SearchRequest
from newsdesk.exceptions import Cancelled, ProviderUnavailable

from .port import SearchProvider

if TYPE_CHECKING:
    from newsdesk.dispatch.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class NewsAPIArticle(BaseModel):
    title: str | None = None
    url: str | None = None


class NewsAPIResponse(BaseModel):
    status: str
    total_results: int = Field(default=0, alias="totalResults")
    articles: list[NewsAPIArticle] = Field(default_factory=list)
    code: str | None = None
    message: str | None = None


def from_date(days: int, today: date | None = None) -> str:
    """First day of a ``days``-long window ending today, as YYYY-MM-DD."""
    today = today or date.today()
    return (today - timedelta(days=days - 1)).isoformat()


class NewsAPIProvider(SearchProvider):
    """NewsAPI ``/everything`` search adapter."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://newsapi.org/v2",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._today = today

    def _params(self, request: SearchRequest) -> dict[str, str | int]:
        return {
            "q": request.topic,
            "from": from_date(request.days, self._today()),
            "pageSize": request.max_items,
            "apiKey": self.api_key,
        }

    def _parse_response(
        self, data: object, request: SearchRequest
    ) -> list[ResultItem]:
        try:
            payload = NewsAPIResponse.model_validate(data)
        except ValidationError as exc:
            raise ProviderUnavailable(
                "unexpected response from NewsAPI",
                details={"topic": request.topic},
            ) from exc

        if payload.status != "ok":
            raise ProviderUnavailable(
                f"NewsAPI returned status {payload.status!r}"
                + (f": {payload.message}" if payload.message else ""),
                details={"topic": request.topic, "code": payload.code},
            )

        results: list[ResultItem] = []
        for article in payload.articles:
            if len(results) >= request.max_items:
                break
            if not article.title or not article.url:
                continue
            results.append(ResultItem(title=article.title, url=article.url))
        return results

    def _get(
        self, client: httpx.Client, params: dict, timeout: float
    ) -> httpx.Response:
        return client.get(
            f"{self.base_url}/everything",
            params=params,
            timeout=timeout,
        )

    def search(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> list[ResultItem]:
        if not self.api_key:
            raise ProviderUnavailable("NEWSAPI_KEY not set")

        timeout = self.timeout
        if token is not None:
            if token.cancelled:
                raise Cancelled()
            timeout = token.cap_timeout(timeout)

        params = self._params(request)
        logger.debug(
            "NewsAPI request: q=%r from=%s pageSize=%d",
            request.topic,
            params["from"],
            request.max_items,
        )
        try:
            if self._client is not None:
                resp = self._get(self._client, params, timeout)
            else:
                with httpx.Client(timeout=timeout) as client:
                    resp = self._get(client, params, timeout)
        except httpx.HTTPError as exc:
            raise ProviderUnavailable(
                f"NewsAPI request failed: {exc.__class__.__name__}",
                details={"topic": request.topic, "error": str(exc)},
            ) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderUnavailable(
                "NewsAPI returned invalid JSON",
                details={"topic": request.topic, "status": resp.status_code},
            ) from exc

        return self._parse_response(data, request)
