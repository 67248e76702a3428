# tests/conftest.py
import importlib
import itertools
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from todolist.storage import SQLiteDB, TaskRepo, apply_migrations

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"

_counter = itertools.count(1)

DEFAULT_ENV = {
    "TODOLIST_LOG_LEVEL": "warning",
    "TODOLIST_MIGRATIONS_DIR": str(MIGRATIONS_DIR),
}


def _apply_env(monkeypatch: pytest.MonkeyPatch, db_path: Path, overrides: Optional[dict[str, str]] = None) -> None:
    monkeypatch.setenv("TODOLIST_DB_PATH", str(db_path))
    for k, v in DEFAULT_ENV.items():
        monkeypatch.setenv(k, v)
    if overrides:
        for k, v in overrides.items():
            monkeypatch.setenv(k, v)


@contextmanager
def _client_ctx(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, *, overrides: Optional[dict[str, str]] = None,
                db_path: Optional[Path] = None, raise_server_exceptions: bool = True) -> Iterator[TestClient]:
    if db_path is None:
        db_path = tmp_path / f"todolist_{next(_counter)}.db"

    _apply_env(monkeypatch, db_path, overrides)

    # Import after env is set; reload so the module-level app picks it up.
    app_mod = importlib.import_module("todolist.api.app")
    importlib.reload(app_mod)

    with TestClient(app_mod.app, raise_server_exceptions=raise_server_exceptions) as client:
        yield client


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """
    Default integration test client with a fresh sqlite db per test.
    """
    with _client_ctx(monkeypatch, tmp_path) as c:
        yield c


@pytest.fixture()
def client_factory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """
    Factory for tests that need custom settings or server errors as responses.

    Usage:
      with client_factory(overrides={"TODOLIST_CORS_ORIGINS": "http://a"}) as client:
          ...
    """

    def _make(*, overrides: Optional[dict[str, str]] = None, db_path: Optional[Path] = None,
              raise_server_exceptions: bool = True):
        return _client_ctx(monkeypatch, tmp_path, overrides=overrides, db_path=db_path,
                           raise_server_exceptions=raise_server_exceptions)

    return _make


@pytest.fixture()
def repo(tmp_path: Path) -> Iterator[TaskRepo]:
    """
    TaskRepo on a freshly migrated database, without the HTTP layer.
    """
    conn = SQLiteDB(tmp_path / "repo.db").connect()
    try:
        apply_migrations(conn, MIGRATIONS_DIR)
        yield TaskRepo(conn)
    finally:
        conn.close()


class FakeClock:
    """Deterministic clock; each call advances by ``step``."""

    def __init__(self, start: datetime = datetime(2026, 1, 6, 10, 30, 0), step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
