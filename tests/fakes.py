"""Test doubles shared across the suite."""

import threading
from datetime import UTC, datetime, timedelta

from newsdesk.data_models import ResultItem, SearchRequest
from newsdesk.dispatch import CancellationToken
from newsdesk.exceptions import ProviderUnavailable


def make_items(prefix: str, count: int) -> list[ResultItem]:
    return [
        ResultItem(title=f"{prefix} {i}", url=f"https://news.example/{prefix}/{i}")
        for i in range(count)
    ]


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None):
        self._now = start or datetime(2026, 1, 1, tzinfo=UTC)
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            self._now += timedelta(seconds=1)
            return self._now


class FakeProvider:
    """In-memory search provider recording every call.

    ``responses`` maps a topic to the items returned for it; topics without
    an entry (or every topic when ``fail`` is set) raise ProviderUnavailable.
    """

    def __init__(
        self,
        responses: dict[str, list[ResultItem]] | None = None,
        fail: bool = False,
    ):
        self.responses = responses or {}
        self.fail = fail
        self.calls: list[SearchRequest] = []
        self._lock = threading.Lock()

    def search(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> list[ResultItem]:
        with self._lock:
            self.calls.append(request)
        if self.fail or request.topic not in self.responses:
            raise ProviderUnavailable("provider down")
        return list(self.responses[request.topic])
