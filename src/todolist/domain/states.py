# src/todolist/domain/states.py
from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Lifecycle stage of a task, stored and serialized by value.

    There are no transition rules: any status may follow any other.
    """

    PENDING = "PENDENTE"
    IN_PROGRESS = "EM_ANDAMENTO"
    DONE = "CONCLUIDA"

    @classmethod
    def allowed_values(cls) -> str:
        return ", ".join(s.value for s in cls)
