# src/todolist/storage/repo.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from todolist.domain.models import TaskView
from todolist.domain.states import TaskStatus
from todolist.logging import get_logger

from .db import write_transaction

_LOG = get_logger(__name__)

_COLUMNS = "id, titulo, descricao, data_criacao, data_atualizacao, status"

# Newest first; ids break ties between tasks created within the same instant.
_NEWEST_FIRST = "ORDER BY data_criacao DESC, id DESC"


def _to_db_time(value: datetime) -> str:
    # Fixed width so lexicographic order equals chronological order.
    return value.isoformat(sep=" ", timespec="microseconds")


def _row_to_view(row: sqlite3.Row) -> TaskView:
    return TaskView(
        id=row["id"],
        title=row["titulo"],
        description=row["descricao"],
        created_at=datetime.fromisoformat(row["data_criacao"]),
        updated_at=datetime.fromisoformat(row["data_atualizacao"]),
        status=TaskStatus(row["status"]),
    )


@dataclass
class TaskRepo:
    """
    Repository encapsulating all SQL access to the ``tarefas`` table.

    Reads return ``None``/empty lists for absent rows; deciding that a missing
    task is an error belongs to the service. Every write runs in a single
    ``BEGIN IMMEDIATE`` transaction.
    """
    conn: sqlite3.Connection

    # -------------------------
    # Read operations
    # -------------------------

    def get_task(self, task_id: int) -> Optional[TaskView]:
        row = self.conn.execute(
            f"SELECT {_COLUMNS} FROM tarefas WHERE id = ?;",
            (task_id,),
        ).fetchone()
        return _row_to_view(row) if row else None

    def list_newest_first(self) -> list[TaskView]:
        rows = self.conn.execute(f"SELECT {_COLUMNS} FROM tarefas {_NEWEST_FIRST};").fetchall()
        return [_row_to_view(r) for r in rows]

    def list_by_status(self, status: TaskStatus) -> list[TaskView]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM tarefas WHERE status = ?;",
            (status.value,),
        ).fetchall()
        return [_row_to_view(r) for r in rows]

    def search_by_title(self, fragment: str, status: Optional[TaskStatus] = None) -> list[TaskView]:
        """
        Case-insensitive substring match on the title, optionally narrowed
        to one status.
        """
        pattern = "%" + _escape_like(fragment.casefold()) + "%"
        sql = f"SELECT {_COLUMNS} FROM tarefas WHERE casefold(titulo) LIKE ? ESCAPE '\\'"
        params: list[object] = [pattern]
        if status is not None:
            sql += " AND status = ?"
            params.append(status.value)
        rows = self.conn.execute(f"{sql} {_NEWEST_FIRST};", params).fetchall()
        return [_row_to_view(r) for r in rows]

    def list_created_between(self, start: datetime, end: datetime) -> list[TaskView]:
        rows = self.conn.execute(
            f"""
            SELECT {_COLUMNS}
            FROM tarefas
            WHERE data_criacao BETWEEN ? AND ?
            {_NEWEST_FIRST};
            """,
            (_to_db_time(start), _to_db_time(end)),
        ).fetchall()
        return [_row_to_view(r) for r in rows]

    def count_by_status(self) -> dict[TaskStatus, int]:
        counts = {status: 0 for status in TaskStatus}
        rows = self.conn.execute("SELECT status, COUNT(*) AS c FROM tarefas GROUP BY status;").fetchall()
        for row in rows:
            counts[TaskStatus(row["status"])] = int(row["c"])
        return counts

    # -------------------------
    # Write operations
    # -------------------------

    def insert_task(
        self,
        *,
        title: str,
        description: Optional[str],
        status: TaskStatus,
        now: datetime,
    ) -> TaskView:
        """
        Inserts a task; creation and update timestamps are both ``now``.
        Returns the stored row, including the id assigned by SQLite.
        """
        with write_transaction(self.conn):
            cur = self.conn.execute(
                """
                INSERT INTO tarefas(titulo, descricao, data_criacao, data_atualizacao, status)
                VALUES (?, ?, ?, ?, ?);
                """,
                (title, description, _to_db_time(now), _to_db_time(now), status.value),
            )
            task_id = cur.lastrowid
            row = self.conn.execute(
                f"SELECT {_COLUMNS} FROM tarefas WHERE id = ?;",
                (task_id,),
            ).fetchone()
        return _row_to_view(row)

    def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: Optional[str],
        status: Optional[TaskStatus],
        now: datetime,
    ) -> Optional[TaskView]:
        """
        Overwrites title and description, and status only when given.

        ``data_atualizacao`` never moves behind ``data_criacao``, even if the
        clock went backwards. Returns ``None`` when no such task exists.
        """
        with write_transaction(self.conn):
            updated = self.conn.execute(
                """
                UPDATE tarefas
                SET titulo = ?,
                    descricao = ?,
                    status = COALESCE(?, status),
                    data_atualizacao = MAX(?, data_criacao)
                WHERE id = ?;
                """,
                (
                    title,
                    description,
                    status.value if status is not None else None,
                    _to_db_time(now),
                    task_id,
                ),
            ).rowcount
            if updated == 0:
                return None
            row = self.conn.execute(
                f"SELECT {_COLUMNS} FROM tarefas WHERE id = ?;",
                (task_id,),
            ).fetchone()
        return _row_to_view(row)

    def delete_task(self, task_id: int) -> bool:
        """
        Hard delete. Returns False when no such task exists.
        """
        with write_transaction(self.conn):
            deleted = self.conn.execute("DELETE FROM tarefas WHERE id = ?;", (task_id,)).rowcount
        if deleted:
            _LOG.debug("Deleted row for task %s", task_id)
        return deleted > 0


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
