"""
`.env` loading and data-path resolution.

Catalog paths in settings (e.g. `data/catalogs/pois.json`) are relative to the
checkout, while the CLI, the API server and the tests all start from different
working directories. Relative paths are therefore resolved against the nearest
directory, walking up from the working directory, that holds a `pyproject.toml` or
a `.env`. The same directory is where `.env` is read from.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ROOT_MARKERS = ("pyproject.toml", ".env")


@lru_cache
def get_base_dir() -> Path:
    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).is_file() for marker in ROOT_MARKERS):
            return candidate
    return cwd


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<base dir>/.env` once without overriding variables already set."""
    env_path = get_base_dir() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_data_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_base_dir() / p).resolve()
