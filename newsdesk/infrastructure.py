"""Explicitly constructed resources shared by the CLI and the HTTP service.

The engine, store, provider and dispatcher are created once per process and
passed to whoever needs them; nothing here is held in module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Engine

from newsdesk.config.settings import Settings
from newsdesk.dispatch import CacheAsideResolver, Dispatcher
from newsdesk.search import NewsAPIProvider, SearchProvider
from newsdesk.storage import (
    SqlResultStore,
    create_session_maker,
    create_store_engine,
    create_tables,
)

logger = logging.getLogger(__name__)


@dataclass
class Infrastructure:
    """Engine, store and running dispatcher for one process.

    - engine: SQLite engine behind the result store
    - store: the shared result store
    - dispatcher: worker pool, already started
    """

    settings: Settings
    engine: Engine
    store: SqlResultStore
    dispatcher: Dispatcher

    @classmethod
    def create(
        cls,
        settings: Settings,
        provider: SearchProvider | None = None,
    ) -> Infrastructure:
        """Open the store, build the provider and start the worker pool."""
        engine = create_store_engine(
            settings.database_path,
            echo=settings.database_echo,
            busy_timeout=settings.store_busy_timeout_seconds,
        )
        create_tables(engine)
        store = SqlResultStore(
            create_session_maker(engine),
            strict_scope=settings.strict_scope_reads,
            busy_timeout=settings.store_busy_timeout_seconds,
        )

        if provider is None:
            if not settings.newsapi_key:
                logger.warning(
                    "NEWSAPI_KEY not set; only cached topics can be served"
                )
            provider = NewsAPIProvider(
                api_key=settings.newsapi_key,
                base_url=settings.newsapi_base_url,
                timeout=settings.provider_timeout_seconds,
            )

        dispatcher = Dispatcher(
            CacheAsideResolver(store, provider),
            workers=settings.workers,
            queue_capacity=settings.queue_capacity,
        ).start()
        return cls(
            settings=settings, engine=engine, store=store, dispatcher=dispatcher
        )

    def close(self) -> None:
        self.dispatcher.close(wait=True)
        self.engine.dispose()

    def __enter__(self) -> Infrastructure:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
