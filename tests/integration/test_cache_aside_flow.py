"""End-to-end cache-aside behavior through the worker pool and SQLite."""

import sqlite3
import time

import pytest

from newsdesk.config.settings import Settings
from newsdesk.data_models import Provenance
from newsdesk.dispatch import build_request
from newsdesk.exceptions import Cancelled, ProviderUnavailable
from newsdesk.infrastructure import Infrastructure
from tests.fakes import FakeProvider, make_items

pytestmark = pytest.mark.integration


class TestCacheAsideFlow:
    def test_fetch_then_serve_from_cache(self, settings: Settings) -> None:
        provider = FakeProvider({"ai": make_items("ai", 5)})

        with Infrastructure.create(settings, provider=provider) as infra:
            first = infra.dispatcher.search("ai", 7, 3, timeout=5)
            second = infra.dispatcher.search("ai", 7, 3, timeout=5)
            stored = infra.store.count("ai")

        assert first.provenance is Provenance.FROM_PROVIDER
        assert len(first.items) == 3
        assert stored >= 3
        assert second.provenance is Provenance.FROM_CACHE
        assert second.items == first.items
        assert len(provider.calls) == 1

    def test_wider_request_refetches_and_keeps_old_rows(
        self, settings: Settings
    ) -> None:
        provider = FakeProvider({"ai": make_items("ai", 10)})

        with Infrastructure.create(settings, provider=provider) as infra:
            infra.dispatcher.search("ai", 1, 2, timeout=5)
            wider = infra.dispatcher.search("ai", 7, 5, timeout=5)
            stored = infra.store.count("ai")

        assert wider.provenance is Provenance.FROM_PROVIDER
        assert len(wider.items) == 5
        assert stored == 7
        assert len(provider.calls) == 2

    def test_provider_outage_uses_stale_rows(self, settings: Settings) -> None:
        provider = FakeProvider({"ai": make_items("ai", 2)})

        with Infrastructure.create(settings, provider=provider) as infra:
            infra.dispatcher.search("ai", 1, 2, timeout=5)
            provider.fail = True
            stale = infra.dispatcher.search("ai", 30, 10, timeout=5)
            missing = infra.dispatcher.search("bitcoin", 1, 1, timeout=5)

        assert stale.provenance is Provenance.FROM_CACHE
        assert [item.title for item in stale.items] == ["ai 0", "ai 1"]
        assert isinstance(missing.error, ProviderUnavailable)

    def test_cache_survives_restart(self, settings: Settings) -> None:
        with Infrastructure.create(
            settings, provider=FakeProvider({"ai": make_items("ai", 3)})
        ) as infra:
            infra.dispatcher.search("ai", 7, 3, timeout=5)

        offline = FakeProvider(fail=True)
        with Infrastructure.create(settings, provider=offline) as infra:
            result = infra.dispatcher.search("ai", 7, 3, timeout=5)

        assert result.provenance is Provenance.FROM_CACHE
        assert offline.calls == []

    def test_concurrent_distinct_topics(self, settings: Settings) -> None:
        topics = [f"topic-{i}" for i in range(20)]
        provider = FakeProvider({topic: make_items(topic, 3) for topic in topics})

        with Infrastructure.create(settings, provider=provider) as infra:
            futures = [
                infra.dispatcher.submit_wait(build_request(topic, 7, 3))
                for topic in topics
            ]
            results = [future.result(timeout=30) for future in futures]
            counts = infra.store.topics()

        assert all(r.provenance is Provenance.FROM_PROVIDER for r in results)
        assert counts == {topic: 3 for topic in topics}

class TestLockedStore:
    def test_locked_database_ends_at_task_deadline(
        self, settings: Settings
    ) -> None:
        provider = FakeProvider({"ai": make_items("ai", 3)})

        with Infrastructure.create(settings, provider=provider) as infra:
            blocker = sqlite3.connect(settings.database_path, isolation_level=None)
            blocker.execute("BEGIN EXCLUSIVE")
            try:
                started = time.monotonic()
                result = infra.dispatcher.search("ai", 7, 3, timeout=0.5)
                elapsed = time.monotonic() - started
            finally:
                blocker.execute("ROLLBACK")
                blocker.close()

        assert isinstance(result.error, Cancelled)
        assert elapsed < 2.0
        assert provider.calls == []
