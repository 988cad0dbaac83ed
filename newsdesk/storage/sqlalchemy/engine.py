"""SQLite engine and session factories."""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .base import Base


def create_store_engine(
    database_path: Path | str,
    echo: bool = False,
    busy_timeout: float = 30.0,
) -> Engine:
    """Create an engine usable from every worker thread.

    ``busy_timeout`` is the default wait on a locked database; the result
    store narrows it per session to the calling task's deadline.
    """
    Path(database_path).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{database_path}",
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": busy_timeout},
        pool_pre_ping=True,
    )


def create_session_maker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, class_=Session, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create all tables (idempotent)."""
    # Import tables to register with Base.metadata
    from . import tables  # noqa: F401

    Base.metadata.create_all(engine)
