"""Shared fixtures for newsdesk tests."""

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import Engine

from newsdesk.storage import (
    SqlResultStore,
    create_session_maker,
    create_store_engine,
    create_tables,
)
from tests.fakes import StepClock


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "news_cache.db"


@pytest.fixture
def engine(db_path: Path) -> Generator[Engine, None, None]:
    engine = create_store_engine(db_path)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store(engine: Engine, clock: StepClock) -> SqlResultStore:
    return SqlResultStore(create_session_maker(engine), clock=clock)
