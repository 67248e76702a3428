from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from .states import TaskStatus

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_timestamp(value: datetime) -> str:
    """Wire format for every timestamp: local time, seconds precision, no zone."""
    return value.strftime(TIMESTAMP_FORMAT)


class _TaskInput(BaseModel):
    """
    Fields shared by the create and update payloads.

    Python attribute names are English; only the aliases are accepted as
    JSON keys. Unknown keys (including a client-sent ``id``) are ignored.
    Numbers sent for text fields are read as their decimal text.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: str = Field(default=None, alias="titulo", validate_default=True)
    description: Optional[str] = Field(default=None, alias="descricao")
    status: Optional[TaskStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("not_blank", "O título é obrigatório")
        return value

    @field_validator("title")
    @classmethod
    def _title_length(cls, value: str) -> str:
        if not TITLE_MIN_LENGTH <= len(value) <= TITLE_MAX_LENGTH:
            raise PydanticCustomError(
                "size",
                "O título deve ter entre {min} e {max} caracteres",
                {"min": TITLE_MIN_LENGTH, "max": TITLE_MAX_LENGTH},
            )
        return value

    @field_validator("description")
    @classmethod
    def _description_length(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
            raise PydanticCustomError(
                "size",
                "A descrição deve ter no máximo {max} caracteres",
                {"max": DESCRIPTION_MAX_LENGTH},
            )
        return value


class TaskCreate(_TaskInput):
    """
    API input model for creating a task.

    A missing ``status`` is defaulted to PENDENTE by the service.
    """


class TaskUpdate(_TaskInput):
    """
    API input model for updating a task.

    Title and description always overwrite the stored values; a missing
    ``status`` keeps the stored one.
    """


class TaskView(BaseModel):
    """
    API output model for a single task.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(alias="titulo")
    description: Optional[str] = Field(default=None, alias="descricao")
    created_at: datetime = Field(alias="dataCriacao")
    updated_at: datetime = Field(alias="dataAtualizacao")
    status: TaskStatus

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class FieldViolation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str
    message: str
    rejected_value: Any = Field(default=None, alias="rejectedValue")


class ErrorResponse(BaseModel):
    """
    Uniform error envelope returned for every failed request.
    """
    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    validation_errors: Optional[list[FieldViolation]] = Field(default=None, alias="validationErrors")

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_content(self) -> dict[str, Any]:
        # Null top-level fields are dropped; a null rejectedValue is kept.
        content = self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"validation_errors"})
        if self.validation_errors is not None:
            content["validationErrors"] = [
                v.model_dump(mode="json", by_alias=True) for v in self.validation_errors
            ]
        return content
