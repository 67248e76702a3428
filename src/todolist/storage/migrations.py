# src/todolist/storage/migrations.py
from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from todolist.logging import get_logger

_LOG = get_logger(__name__)

_MIGRATION_RE = re.compile(r"^(?P<version>\d+)_(?P<name>.+)\.sql$")


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name


def apply_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> list[int]:
    """
    Applies pending SQL migrations from migrations_dir in version order.

    Each file runs in its own transaction together with the row recording it
    in schema_migrations, so a failing script leaves no partial schema behind.
    Files not named ``<version>_<name>.sql`` are ignored.

    Returns the versions applied by this call.
    """
    migrations_dir = migrations_dir.resolve()
    if not migrations_dir.is_dir():
        raise FileNotFoundError(f"Migrations dir not found: {migrations_dir}")

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations(
          version INTEGER PRIMARY KEY,
          filename TEXT NOT NULL,
          applied_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
        );
        """
    )

    applied = {
        int(r["version"]) for r in conn.execute("SELECT version FROM schema_migrations;").fetchall()
    }
    pending = [m for m in discover_migrations(migrations_dir) if m.version not in applied]
    if not pending:
        _LOG.info("Schema is up to date.")
        return []

    for m in pending:
        _LOG.info("Applying migration %03d (%s)", m.version, m.filename)
        script = m.path.read_text(encoding="utf-8")
        try:
            conn.executescript(
                "BEGIN;\n"
                f"{script}\n;"
                f"INSERT INTO schema_migrations(version, filename) VALUES ({m.version}, '{_quote(m.filename)}');\n"
                "COMMIT;"
            )
        except sqlite3.Error:
            if conn.in_transaction:
                conn.execute("ROLLBACK;")
            _LOG.error("Migration %03d failed; schema left at the previous version.", m.version)
            raise

    _LOG.info("Applied %d migration(s).", len(pending))
    return [m.version for m in pending]


def discover_migrations(migrations_dir: Path) -> list[Migration]:
    migrations: list[Migration] = []
    for path in migrations_dir.glob("*.sql"):
        match = _MIGRATION_RE.match(path.name)
        if match:
            migrations.append(Migration(version=int(match["version"]), name=match["name"], path=path))
    migrations.sort(key=lambda m: m.version)
    return migrations


def _quote(value: str) -> str:
    return value.replace("'", "''")
