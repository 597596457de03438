"""Small filesystem helpers that log instead of raising."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def create_dir_if_not_exists(directory: PathLike) -> bool:
    """Create ``directory`` (and parents). Returns ``False`` if that fails."""
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log.error("unable to create directory %s: %s", directory, exc)
        return False
    return True


def read_file(path: PathLike, encoding: str = "utf-8") -> Optional[str]:
    """Return the content of ``path`` or ``None`` if it cannot be read."""
    try:
        return Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("unable to read file %s: %s", path, exc)
        return None


def write_file(path: PathLike, content: str, encoding: str = "utf-8") -> bool:
    try:
        Path(path).write_text(content, encoding=encoding)
    except OSError as exc:
        log.error("unable to write file %s: %s", path, exc)
        return False
    return True


__all__ = ["create_dir_if_not_exists", "read_file", "write_file"]
