from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._utils import resolve_env_file_path


class Settings(BaseSettings):
    """newsdesk configuration."""

    log_level: str = "INFO"

    # SQLite cache of fetched articles
    database_path: Path = Path("news_cache.db")
    database_echo: bool = False
    # Longest wait on a locked database; task deadlines shorten it
    store_busy_timeout_seconds: float = Field(default=30.0, gt=0)

    # Worker pool
    workers: int = Field(default=8, ge=1)
    queue_capacity: int = Field(default=1000, ge=1)
    task_timeout_seconds: float = Field(default=20.0, gt=0)

    # The key keeps its historical unprefixed name
    newsapi_key: str = Field(default="", validation_alias="NEWSAPI_KEY")
    newsapi_base_url: str = "https://newsapi.org/v2"
    provider_timeout_seconds: float = Field(default=10.0, gt=0)

    # Only serve cached rows whose stored scope covers the request
    strict_scope_reads: bool = False

    # Batch files
    input_dir: Path = Path("Inputs")
    output_dir: Path = Path("Outputs")

    model_config = SettingsConfigDict(
        env_file=resolve_env_file_path(),
        env_file_encoding="utf-8",
        env_prefix="NEWSDESK_",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
