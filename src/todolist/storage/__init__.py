# src/todolist/storage/__init__.py
"""
Storage layer for the todolist API (SQLite).

- db: connection factory + transaction helpers
- migrations: SQL migrations runner
- repo: data access for the tarefas table
"""

from .db import SQLiteDB
from .migrations import apply_migrations
from .repo import TaskRepo

__all__ = ["SQLiteDB", "apply_migrations", "TaskRepo"]
