"""Fixtures wiring real components together."""

from collections.abc import Generator
from pathlib import Path

import pytest

from newsdesk.config.settings import Settings, get_settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every file at a temp directory."""
    return Settings(
        database_path=tmp_path / "news_cache.db",
        output_dir=tmp_path / "Outputs",
        input_dir=tmp_path / "Inputs",
        newsapi_key="",
        workers=4,
        task_timeout_seconds=10.0,
    )


@pytest.fixture
def env_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """Same as ``settings`` but provided through the environment."""
    monkeypatch.setenv("NEWSDESK_DATABASE_PATH", str(tmp_path / "news_cache.db"))
    monkeypatch.setenv("NEWSDESK_OUTPUT_DIR", str(tmp_path / "Outputs"))
    monkeypatch.setenv("NEWSDESK_INPUT_DIR", str(tmp_path / "Inputs"))
    monkeypatch.setenv("NEWSDESK_WORKERS", "2")
    monkeypatch.setenv("NEWSAPI_KEY", "")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
