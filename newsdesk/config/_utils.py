import os
from pathlib import Path

ENV_FILE_VAR = "NEWSDESK_ENV_FILE"


def _find_project_root() -> Path:
    """Nearest ancestor holding pyproject.toml or .git, else the cwd."""
    here = Path(__file__).resolve().parent
    for parent in [here, *here.parents]:
        if (parent / "pyproject.toml").is_file() or (parent / ".git").is_dir():
            return parent
    return Path.cwd()


def resolve_env_file_path() -> Path | None:
    """Resolve the .env file read by Settings.

    Priority:
    1. NEWSDESK_ENV_FILE (absolute, or relative to the project root)
    2. config/.env.dev (local development)
    3. config/.env
    """
    root = _find_project_root()

    explicit = os.environ.get(ENV_FILE_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = root / path
        if path.exists():
            return path

    for name in (".env.dev", ".env"):
        candidate = root / "config" / name
        if candidate.exists():
            return candidate

    return None
