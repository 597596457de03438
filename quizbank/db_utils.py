"""Helpers for resolving the SQLite database path used by the app."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

PACKAGE_ROOT = Path(__file__).resolve().parent
SQL_DIR = PACKAGE_ROOT / "sql"
DEFAULT_DB_RELATIVE = Path("instance/quiz.db")
SQLITE_URL_PREFIX = "sqlite:///"


def _clean_path(value: Optional[str]) -> str:
    """Normalize an environment-provided path or ``sqlite:///`` URL."""
    if not value:
        return str(DEFAULT_DB_RELATIVE)
    cleaned = value.strip().strip('"').strip("'")
    if cleaned.startswith(SQLITE_URL_PREFIX):
        cleaned = cleaned[len(SQLITE_URL_PREFIX):]
    return cleaned or str(DEFAULT_DB_RELATIVE)


def resolve_db_path(raw: Optional[str] = None, base_dir: Optional[Path] = None) -> Path:
    """Return the absolute path to the SQLite database."""
    candidate = Path(_clean_path(raw))
    if not candidate.is_absolute():
        candidate = (base_dir or Path.cwd()) / candidate
    return candidate


__all__ = ["resolve_db_path", "DEFAULT_DB_RELATIVE", "SQL_DIR"]
