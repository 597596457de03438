"""Thin wrapper around a SQLite connection.

Every failure is caught here and reported through the logger; callers get
``None``/``False`` back and decide whether to carry on.
"""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Sequence, Union

log = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class QueryResult(NamedTuple):
    rows: List[sqlite3.Row]


class Database:
    def __init__(self, path: Union[str, Path], logger: Optional[logging.Logger] = None) -> None:
        self.path = str(path)
        self.logger = logger or log
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> bool:
        """Open the connection if it is not open yet."""
        if self._conn is not None:
            return True

        try:
            if self.path != MEMORY_DATABASE:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            # Row dicts + FK on
            conn = sqlite3.connect(self.path, detect_types=sqlite3.PARSE_DECLTYPES)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
        except (sqlite3.Error, OSError) as exc:
            self.logger.error("unable to open database %s: %s", self.path, exc)
            return False

        self._conn = conn
        return True

    def connect(self) -> Optional[sqlite3.Connection]:
        """Return the open connection, opening it first if needed."""
        if not self.open():
            return None
        return self._conn

    def query(self, sql: str, params: Sequence[Any] = ()) -> Optional[QueryResult]:
        """Run a single statement and commit. Returns ``None`` on failure."""
        conn = self.connect()
        if conn is None:
            return None

        try:
            cursor = conn.execute(sql, tuple(params))
            rows = cursor.fetchall()
            conn.commit()
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            self.logger.error("unable to query database: %s", exc)
            conn.rollback()
            return None

        return QueryResult(rows)

    def query_script(self, script: str) -> bool:
        """Run a multi-statement SQL script such as a schema file."""
        conn = self.connect()
        if conn is None:
            return False

        try:
            conn.executescript(script)
            conn.commit()
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            self.logger.error("unable to run sql script: %s", exc)
            return False
        return True

    def close(self) -> bool:
        conn, self._conn = self._conn, None
        if conn is None:
            return True
        try:
            conn.close()
        except sqlite3.Error as exc:
            self.logger.error("unable to close database: %s", exc)
            return False
        return True


__all__ = ["Database", "QueryResult"]
