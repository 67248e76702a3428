"""
Domain layer for the todolist API.

- states: TaskStatus enum
- models: Pydantic models for API input/output
- errors: domain-level exceptions
"""

from .states import TaskStatus
from .models import (
    ErrorResponse,
    FieldViolation,
    TaskCreate,
    TaskUpdate,
    TaskView,
)
from .errors import (
    TodoListError,
    ResourceNotFoundError,
    BusinessRuleError,
    InvalidDataError,
)

__all__ = [
    "TaskStatus",
    "TaskCreate",
    "TaskUpdate",
    "TaskView",
    "FieldViolation",
    "ErrorResponse",
    "TodoListError",
    "ResourceNotFoundError",
    "BusinessRuleError",
    "InvalidDataError",
]
