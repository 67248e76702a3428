# src/todolist/storage/db.py
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional


@dataclass(frozen=True)
class SQLiteDB:
    """
    SQLite connection factory.

    Notes:
    - One connection per request; connections are not shared across threads.
    - Pragmas are applied on each connection.
    """
    db_path: Path
    timeout_s: float = 5.0

    def connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.timeout_s,
            isolation_level=None,          # transactions are explicit (BEGIN/COMMIT)
            check_same_thread=False,       # FastAPI may run a sync dependency and its route on different threads
        )
        conn.row_factory = sqlite3.Row
        # SQLite's own lower() only folds ASCII letters.
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        self._apply_pragmas(conn)
        return conn

    def _apply_pragmas(self, conn: sqlite3.Connection) -> None:
        cur = conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA busy_timeout=5000;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.close()


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def begin_immediate(conn: sqlite3.Connection) -> None:
    """
    Begins a transaction that takes the write lock up front, so a
    read-then-write sequence cannot interleave with another writer.
    """
    conn.execute("BEGIN IMMEDIATE;")


def commit(conn: sqlite3.Connection) -> None:
    conn.execute("COMMIT;")


def rollback(conn: sqlite3.Connection) -> None:
    conn.execute("ROLLBACK;")


@contextmanager
def write_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Runs the body as one atomic write: commit on success, rollback and
    re-raise on any exception.
    """
    begin_immediate(conn)
    try:
        yield conn
    except BaseException:
        rollback(conn)
        raise
    commit(conn)
