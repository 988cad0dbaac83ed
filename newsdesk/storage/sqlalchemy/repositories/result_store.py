from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from newsdesk.data_models import CacheRecord, ResultItem, ScopeCoverage
from newsdesk.exceptions import StoreUnavailable
from newsdesk.storage.sqlalchemy.tables import CachedSearchTable

if TYPE_CHECKING:
    from newsdesk.dispatch.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class SqlResultStore:
    """Append-only store of fetched articles, shared by all workers.

    Every call opens its own session, so reads from different threads run
    concurrently. Appends are serialized by a lock; SQLite allows a single
    writer anyway and a failed insert must not interleave with another.

    Every operation accepts the calling task's cancellation token. Waits on
    a locked database (SQLite busy timeout) and on the write lock end no
    later than the token's deadline.
    """

    def __init__(
        self,
        session_maker: sessionmaker[Session],
        strict_scope: bool = False,
        clock: Callable[[], datetime] | None = None,
        busy_timeout: float = 30.0,
    ):
        self._session_maker = session_maker
        self._strict_scope = strict_scope
        self._clock = clock or (lambda: datetime.now(UTC))
        self._write_lock = threading.Lock()
        self._busy_timeout = busy_timeout

    def _wait_budget(self, token: CancellationToken | None) -> float:
        if token is None:
            return self._busy_timeout
        return token.cap_timeout(self._busy_timeout)

    @contextmanager
    def _session(
        self, operation: str, token: CancellationToken | None = None
    ) -> Iterator[Session]:
        busy_ms = math.ceil(self._wait_budget(token) * 1000)
        try:
            with self._session_maker() as session:
                # Per connection; pooled connections are reused across tasks
                session.execute(text(f"PRAGMA busy_timeout = {busy_ms}"))
                yield session
        except SQLAlchemyError as exc:
            logger.error("Result store %s failed: %s", operation, exc)
            raise StoreUnavailable(
                f"result store {operation} failed",
                details={"error": str(exc)},
            ) from exc

    def max_covered_scope(
        self, topic: str, token: CancellationToken | None = None
    ) -> ScopeCoverage:
        """Return the largest days and max_items ever stored for ``topic``."""
        stmt = select(
            func.max(CachedSearchTable.days),
            func.max(CachedSearchTable.max_items),
        ).where(CachedSearchTable.query == topic)
        with self._session("coverage lookup", token) as session:
            days, max_items = session.execute(stmt).one()
        return ScopeCoverage(days=days or 0, max_items=max_items or 0)

    def records(
        self,
        topic: str,
        days: int,
        max_items: int,
        token: CancellationToken | None = None,
    ) -> list[CacheRecord]:
        """Return up to ``max_items`` records for ``topic``, newest fetch first.

        Unless the store is strict, the scope arguments only bound the result
        size: any record of the topic is eligible. Rows of one fetch keep the
        provider's order.
        """
        stmt = select(CachedSearchTable).where(CachedSearchTable.query == topic)
        if self._strict_scope:
            stmt = stmt.where(
                CachedSearchTable.days >= days,
                CachedSearchTable.max_items >= max_items,
            )
        stmt = stmt.order_by(
            CachedSearchTable.fetched_at.desc(),
            CachedSearchTable.id.asc(),
        ).limit(max_items)

        with self._session("read", token) as session:
            rows = session.scalars(stmt).all()
            return [
                CacheRecord(
                    topic=row.query,
                    days=row.days,
                    max_items=row.max_items,
                    title=row.title,
                    url=row.url,
                    fetched_at=row.fetched_at,
                )
                for row in rows
            ]

    def read_top_k(
        self,
        topic: str,
        days: int,
        max_items: int,
        token: CancellationToken | None = None,
    ) -> list[ResultItem]:
        records = self.records(topic, days, max_items, token=token)
        return [record.to_item() for record in records]

    def append(
        self,
        topic: str,
        days: int,
        max_items: int,
        items: Sequence[ResultItem],
        token: CancellationToken | None = None,
    ) -> None:
        """Insert one row per item, all stamped with the same fetch time."""
        if not items:
            return

        fetched_at = self._clock()
        rows = [
            CachedSearchTable(
                query=topic,
                days=days,
                max_items=max_items,
                title=item.title,
                url=item.url,
                fetched_at=fetched_at,
            )
            for item in items
        ]
        if not self._write_lock.acquire(timeout=self._wait_budget(token)):
            raise StoreUnavailable(
                "result store append timed out waiting for the write lock",
                details={"topic": topic},
            )
        try:
            with self._session("append", token) as session:
                session.add_all(rows)
                session.commit()
        finally:
            self._write_lock.release()
        logger.debug(
            "Stored %d items for %r (days=%d, max_items=%d)",
            len(rows),
            topic,
            days,
            max_items,
        )

    def count(self, topic: str | None = None) -> int:
        stmt = select(func.count()).select_from(CachedSearchTable)
        if topic is not None:
            stmt = stmt.where(CachedSearchTable.query == topic)
        with self._session("count") as session:
            return session.execute(stmt).scalar() or 0

    def topics(self) -> dict[str, int]:
        """Return the number of stored records per topic."""
        stmt = (
            select(CachedSearchTable.query, func.count())
            .group_by(CachedSearchTable.query)
            .order_by(CachedSearchTable.query)
        )
        with self._session("topic listing") as session:
            return {query: n for query, n in session.execute(stmt).all()}
