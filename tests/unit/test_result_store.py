"""Tests for SqlResultStore."""

import sqlite3
import threading
import time
from pathlib import Path

import pytest
from sqlalchemy import Engine

from newsdesk.data_models import ScopeCoverage
from newsdesk.dispatch import CancellationToken
from newsdesk.exceptions import StoreUnavailable
from newsdesk.storage import (
    SqlResultStore,
    create_session_maker,
    create_store_engine,
)
from tests.fakes import StepClock, make_items


class TestMaxCoveredScope:
    def test_unseen_topic(self, store: SqlResultStore) -> None:
        assert store.max_covered_scope("ai") == ScopeCoverage(0, 0)

    def test_maxima_are_independent(self, store: SqlResultStore) -> None:
        store.append("ai", 30, 2, make_items("a", 2))
        store.append("ai", 3, 10, make_items("b", 2))

        coverage = store.max_covered_scope("ai")

        assert coverage.days == 30
        assert coverage.max_items == 10

    def test_topics_are_case_sensitive(self, store: SqlResultStore) -> None:
        store.append("AI", 7, 3, make_items("a", 3))

        assert store.max_covered_scope("ai") == ScopeCoverage(0, 0)
        assert store.max_covered_scope("AI") == ScopeCoverage(7, 3)


class TestReadTopK:
    def test_empty(self, store: SqlResultStore) -> None:
        assert store.read_top_k("ai", 7, 3) == []

    def test_limits_to_max_items(self, store: SqlResultStore) -> None:
        store.append("ai", 7, 10, make_items("a", 10))

        assert len(store.read_top_k("ai", 7, 4)) == 4

    def test_keeps_provider_order_within_a_fetch(
        self, store: SqlResultStore
    ) -> None:
        items = make_items("a", 3)
        store.append("ai", 7, 3, items)

        assert store.read_top_k("ai", 7, 3) == items

    def test_most_recent_fetch_first(self, store: SqlResultStore) -> None:
        old = make_items("old", 2)
        new = make_items("new", 2)
        store.append("ai", 7, 2, old)
        store.append("ai", 7, 2, new)

        assert store.read_top_k("ai", 7, 4) == new + old

    def test_any_record_of_the_topic_is_eligible(
        self, store: SqlResultStore
    ) -> None:
        items = make_items("narrow", 2)
        store.append("ai", 1, 2, items)

        assert store.read_top_k("ai", 30, 10) == items

    def test_strict_scope_only_reads_covering_records(
        self, engine: Engine, clock: StepClock
    ) -> None:
        strict = SqlResultStore(
            create_session_maker(engine), strict_scope=True, clock=clock
        )
        wide = make_items("wide", 2)
        strict.append("ai", 30, 10, wide)
        strict.append("ai", 1, 2, make_items("narrow", 2))

        assert strict.read_top_k("ai", 7, 5) == wide

    def test_other_topics_are_not_returned(self, store: SqlResultStore) -> None:
        store.append("ai", 7, 3, make_items("a", 3))

        assert store.read_top_k("bitcoin", 7, 3) == []

    def test_records_carry_scope_tags(self, store: SqlResultStore) -> None:
        store.append("ai", 7, 3, make_items("a", 1))

        (record,) = store.records("ai", 7, 3)

        assert record.topic == "ai"
        assert record.days == 7
        assert record.max_items == 3
        assert record.fetched_at is not None


class TestAppend:
    def test_refetch_keeps_duplicates(self, store: SqlResultStore) -> None:
        items = make_items("a", 3)
        store.append("ai", 7, 3, items)
        store.append("ai", 14, 3, items)

        assert store.count("ai") == 6

    def test_empty_append_is_a_no_op(self, store: SqlResultStore) -> None:
        store.append("ai", 7, 3, [])

        assert store.count() == 0
        assert store.max_covered_scope("ai") == ScopeCoverage(0, 0)

    def test_concurrent_appends(self, store: SqlResultStore) -> None:
        topics = [f"topic-{i}" for i in range(8)]
        threads = [
            threading.Thread(
                target=store.append, args=(topic, 7, 5, make_items(topic, 5))
            )
            for topic in topics
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.count() == 40
        assert store.topics() == {topic: 5 for topic in topics}


class TestStoreUnavailable:
    @pytest.fixture
    def broken_store(self, tmp_path) -> SqlResultStore:
        # Tables are never created, so every statement fails
        engine = create_store_engine(tmp_path / "empty.db")
        return SqlResultStore(create_session_maker(engine))

    def test_coverage_lookup(self, broken_store: SqlResultStore) -> None:
        with pytest.raises(StoreUnavailable):
            broken_store.max_covered_scope("ai")

    def test_read(self, broken_store: SqlResultStore) -> None:
        with pytest.raises(StoreUnavailable):
            broken_store.read_top_k("ai", 7, 3)

    def test_append(self, broken_store: SqlResultStore) -> None:
        with pytest.raises(StoreUnavailable):
            broken_store.append("ai", 7, 3, make_items("a", 1))


class TestLockedDatabase:
    @pytest.fixture
    def locked(self, store: SqlResultStore, db_path: Path):
        blocker = sqlite3.connect(db_path, isolation_level=None)
        blocker.execute("BEGIN EXCLUSIVE")
        yield blocker
        blocker.execute("ROLLBACK")
        blocker.close()

    def test_read_gives_up_at_token_deadline(
        self, store: SqlResultStore, locked
    ) -> None:
        token = CancellationToken.with_timeout(0.3)
        started = time.monotonic()

        with pytest.raises(StoreUnavailable):
            store.max_covered_scope("ai", token=token)

        assert time.monotonic() - started < 2.0
        assert token.cancelled

    def test_append_gives_up_at_token_deadline(
        self, store: SqlResultStore, locked
    ) -> None:
        token = CancellationToken.with_timeout(0.3)
        started = time.monotonic()

        with pytest.raises(StoreUnavailable):
            store.append("ai", 7, 3, make_items("a", 3), token=token)

        assert time.monotonic() - started < 2.0

    def test_store_recovers_once_lock_is_released(
        self, store: SqlResultStore, db_path: Path
    ) -> None:
        blocker = sqlite3.connect(db_path, isolation_level=None)
        blocker.execute("BEGIN EXCLUSIVE")
        with pytest.raises(StoreUnavailable):
            store.max_covered_scope("ai", token=CancellationToken.with_timeout(0.1))
        blocker.execute("ROLLBACK")
        blocker.close()

        store.append("ai", 7, 3, make_items("a", 3))

        assert store.count("ai") == 3
