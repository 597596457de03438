"""Validated configuration read from the process environment."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, NamedTuple, Optional

from .db_utils import resolve_db_path

DEFAULT_PORT = 3000
DEFAULT_SESSION_SECRET = "dev-secret"

log = logging.getLogger(__name__)


class Environment(NamedTuple):
    port: int
    database_path: Path
    session_secret: str


def environment(
    env: Mapping[str, str], logger: Optional[logging.Logger] = None
) -> Optional[Environment]:
    """Validate ``env`` and return the settings, or ``None`` if it is invalid.

    Every problem is logged before giving up so a misconfigured deployment
    reports all of them at once.
    """
    logger = logger or log
    error = False

    connection_string = (env.get("DATABASE_URL") or "").strip()
    if not connection_string:
        logger.error("DATABASE_URL must be defined as a string")
        error = True

    raw_port = (env.get("PORT") or "").strip()
    port = DEFAULT_PORT
    if raw_port:
        try:
            port = int(raw_port, 10)
        except ValueError:
            logger.error("PORT must be defined as a number, got %r", raw_port)
            error = True
        else:
            if port <= 0:
                logger.info("PORT %s is not a usable port, using default port %s", port, DEFAULT_PORT)
                port = DEFAULT_PORT
    else:
        logger.info("PORT not defined, using default port %s", DEFAULT_PORT)

    session_secret = env.get("SESSION_SECRET") or ""
    if not session_secret:
        logger.warning("SESSION_SECRET not defined, using an insecure default")
        session_secret = DEFAULT_SESSION_SECRET

    if error:
        return None

    return Environment(
        port=port,
        database_path=resolve_db_path(connection_string),
        session_secret=session_secret,
    )


__all__ = ["Environment", "environment", "DEFAULT_PORT"]
