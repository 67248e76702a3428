# src/todolist/service/tasks.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from todolist.domain.errors import InvalidDataError, ResourceNotFoundError
from todolist.domain.models import TaskCreate, TaskUpdate, TaskView
from todolist.domain.states import TaskStatus
from todolist.logging import get_logger
from todolist.storage import TaskRepo

_LOG = get_logger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Server-local wall clock, naive, as stored in the tarefas table."""
    return datetime.now()


def _as_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class TaskService:
    """
    Business rules for the task lifecycle.

    Inputs arrive already validated (see ``TaskCreate``/``TaskUpdate``).
    Missing tasks raise ``ResourceNotFoundError``; the API layer maps it.
    """

    def __init__(self, repo: TaskRepo, clock: Clock = local_now) -> None:
        self._repo = repo
        self._clock = clock

    def create(self, data: TaskCreate) -> TaskView:
        _LOG.info("Creating task with title: %s", data.title)

        task = self._repo.insert_task(
            title=data.title,
            description=data.description,
            status=data.status or TaskStatus.PENDING,
            now=self._clock(),
        )
        _LOG.info("Task created. id=%s", task.id)
        return task

    def get_by_id(self, task_id: int) -> TaskView:
        _LOG.info("Fetching task id=%s", task_id)

        task = self._repo.get_task(task_id)
        if task is None:
            raise self._not_found(task_id)
        return task

    def list_all(self) -> list[TaskView]:
        _LOG.info("Listing all tasks")

        tasks = self._repo.list_newest_first()
        _LOG.info("Tasks found: %d", len(tasks))
        return tasks

    def list_by_status(self, status: TaskStatus) -> list[TaskView]:
        _LOG.info("Listing tasks with status %s", status.value)

        tasks = self._repo.list_by_status(status)
        _LOG.info("Tasks found with status %s: %d", status.value, len(tasks))
        return tasks

    def update(self, task_id: int, data: TaskUpdate) -> TaskView:
        _LOG.info("Updating task id=%s", task_id)

        task = self._repo.update_task(
            task_id,
            title=data.title,
            description=data.description,
            status=data.status,
            now=self._clock(),
        )
        if task is None:
            raise self._not_found(task_id)
        _LOG.info("Task updated. id=%s", task.id)
        return task

    def delete(self, task_id: int) -> None:
        _LOG.info("Deleting task id=%s", task_id)

        if not self._repo.delete_task(task_id):
            raise self._not_found(task_id)
        _LOG.info("Task deleted. id=%s", task_id)

    def search(self, title: str, status: Optional[TaskStatus] = None) -> list[TaskView]:
        _LOG.info("Searching tasks by title %r (status=%s)", title, status.value if status else None)
        return self._repo.search_by_title(title, status)

    def count_by_status(self) -> dict[TaskStatus, int]:
        return self._repo.count_by_status()

    def list_created_between(self, start: datetime, end: datetime) -> list[TaskView]:
        start, end = _as_local_naive(start), _as_local_naive(end)
        if start > end:
            raise InvalidDataError(
                "A data inicial deve ser anterior ou igual à data final",
                details={"inicio": start.isoformat(), "fim": end.isoformat()},
            )
        _LOG.info("Listing tasks created between %s and %s", start, end)
        return self._repo.list_created_between(start, end)

    @staticmethod
    def _not_found(task_id: int) -> ResourceNotFoundError:
        _LOG.warning("Task not found. id=%s", task_id)
        return ResourceNotFoundError(f"Tarefa não encontrada com ID: {task_id}", details={"id": task_id})
