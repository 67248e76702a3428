# src/todolist/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TodoListError(Exception):
    """
    Base domain error.

    The API layer maps each subclass to one HTTP status. Chain the cause with
    ``raise ... from exc`` when wrapping a lower-level failure.
    """
    message: str
    code: str = "TODOLIST_ERROR"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ResourceNotFoundError(TodoListError):
    code: str = "NOT_FOUND"


@dataclass
class BusinessRuleError(TodoListError):
    # No rule raises this yet; kept so the API contract already maps it (422).
    code: str = "BUSINESS_RULE"


@dataclass
class InvalidDataError(TodoListError):
    code: str = "INVALID_DATA"
