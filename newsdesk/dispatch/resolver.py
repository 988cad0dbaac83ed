"""Cache-aside resolution of a single search request."""

from __future__ import annotations

import logging

from newsdesk.data_models import Provenance, ResultItem, SearchRequest, TaskResult
from newsdesk.exceptions import (
    Cancelled,
    NewsdeskError,
    ProviderUnavailable,
    StoreUnavailable,
)
from newsdesk.search import SearchProvider
from newsdesk.storage import ResultStore

from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


class CacheAsideResolver:
    """Decide between the result store and the search provider for one task.

    A request is served from the store when the store's coverage for the
    topic dominates the requested scope. Otherwise the provider is called
    once; fetched items are appended and then read back, so the response is
    exactly what is now stored. When the provider fails, whatever the store
    holds for the topic is served instead; only an empty store turns the
    failure into an error.

    The task's token is passed to every store and provider call, so each
    wait ends at the deadline; a failure after it fired is Cancelled.
    """

    def __init__(self, store: ResultStore, provider: SearchProvider):
        self.store = store
        self.provider = provider

    def _read(
        self, request: SearchRequest, token: CancellationToken
    ) -> list[ResultItem]:
        return self.store.read_top_k(
            request.topic, request.days, request.max_items, token=token
        )

    def _fetch(
        self, request: SearchRequest, token: CancellationToken
    ) -> TaskResult:
        try:
            fetched = self.provider.search(request, token)
        except ProviderUnavailable as exc:
            if token.cancelled:
                return TaskResult.failure(Cancelled())
            return self._fallback(request, token, exc)

        fetched = fetched[: request.max_items]
        self.store.append(
            request.topic, request.days, request.max_items, fetched, token=token
        )
        logger.info(
            "Fetched %d items for %r from provider", len(fetched), request.topic
        )
        return TaskResult.success(
            self._read(request, token), Provenance.FROM_PROVIDER
        )

    def _fallback(
        self,
        request: SearchRequest,
        token: CancellationToken,
        error: ProviderUnavailable,
    ) -> TaskResult:
        items = self._read(request, token)
        if items:
            logger.warning(
                "Provider failed for %r (%s); serving %d cached items",
                request.topic,
                error,
                len(items),
            )
            return TaskResult.success(items, Provenance.FROM_CACHE)

        logger.warning(
            "Provider failed for %r with nothing cached: %s", request.topic, error
        )
        return TaskResult.failure(error)

    def resolve(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> TaskResult:
        token = token or CancellationToken()
        if token.cancelled:
            logger.debug("Task for %r cancelled before resolution", request.topic)
            return TaskResult.failure(Cancelled())

        try:
            coverage = self.store.max_covered_scope(request.topic, token=token)
            if coverage.covers(request):
                logger.debug(
                    "Cache hit for %r (covered days=%d, max_items=%d)",
                    request.topic,
                    coverage.days,
                    coverage.max_items,
                )
                return TaskResult.success(
                    self._read(request, token), Provenance.FROM_CACHE
                )

            logger.debug("Cache miss for %r", request.topic)
            return self._fetch(request, token)
        except StoreUnavailable as exc:
            if token.cancelled:
                logger.warning(
                    "Task for %r hit its deadline in the result store: %s",
                    request.topic,
                    exc,
                )
                return TaskResult.failure(Cancelled())
            logger.error("Task for %r failed: %s", request.topic, exc)
            return TaskResult.failure(exc)
        except NewsdeskError as exc:
            return TaskResult.failure(exc)
