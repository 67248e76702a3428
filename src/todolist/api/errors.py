# src/todolist/api/errors.py
"""
Maps every failure to the uniform error envelope.

Domain errors, request validation failures, router errors (404/405) and
unexpected exceptions are each converted here, exactly once.
"""
from __future__ import annotations

from datetime import datetime
from http import HTTPStatus
from typing import Any, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todolist.domain.errors import (
    BusinessRuleError,
    InvalidDataError,
    ResourceNotFoundError,
)
from todolist.domain.models import ErrorResponse, FieldViolation
from todolist.domain.states import TaskStatus
from todolist.logging import get_logger

_LOG = get_logger(__name__)

MSG_VALIDATION = "Erro de validação nos dados da requisição"
MSG_MALFORMED = "Formato de JSON inválido ou dados incompatíveis"
MSG_BAD_STATUS = f"Valor inválido para o campo 'status'. Valores permitidos: {TaskStatus.allowed_values()}"
MSG_INTERNAL = "Erro interno no servidor. Por favor, tente novamente mais tarde."

# Error types raised by the field rules in todolist.domain.models. Any other
# body error means the payload could not be read into the expected shape.
_FIELD_RULE_TYPES = frozenset({"not_blank", "size"})

_EXPECTED_TYPES = {
    "int_parsing": "int",
    "int_type": "int",
    "enum": "StatusTarefa",
    "datetime_parsing": "datetime",
    "datetime_from_date_parsing": "datetime",
    "datetime_type": "datetime",
}


def error_response(
    request: Request,
    status_code: int,
    message: str,
    validation_errors: Optional[list[FieldViolation]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    payload = ErrorResponse(
        timestamp=datetime.now(),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
        validation_errors=validation_errors,
    )
    return JSONResponse(status_code=status_code, content=payload.to_content(), headers=headers)


async def handle_not_found(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    _LOG.warning("Resource not found: %s", exc.message)
    return error_response(request, 404, exc.message)


async def handle_business_rule(request: Request, exc: BusinessRuleError) -> JSONResponse:
    _LOG.warning("Business rule violated: %s", exc.message)
    return error_response(request, 422, exc.message)


async def handle_invalid_data(request: Request, exc: InvalidDataError) -> JSONResponse:
    _LOG.warning("Invalid data: %s", exc.message)
    return error_response(request, 400, exc.message)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Sequence[dict[str, Any]] = exc.errors()

    param_errors = [e for e in errors if e["loc"] and e["loc"][0] in ("path", "query")]
    if param_errors:
        message = _param_error_message(param_errors[0])
        _LOG.warning("Invalid request parameter on %s: %s", request.url.path, message)
        return error_response(request, 400, message)

    if any(e["loc"][1:2] == ("status",) for e in errors):
        _LOG.warning("Unreadable status in request body on %s", request.url.path)
        return error_response(request, 400, MSG_BAD_STATUS)

    if any(e["type"] not in _FIELD_RULE_TYPES for e in errors):
        _LOG.warning("Malformed request body on %s: %s", request.url.path, [e["type"] for e in errors])
        return error_response(request, 400, MSG_MALFORMED)

    _LOG.warning("Validation failed on %s", request.url.path)
    violations = [
        FieldViolation(field=str(e["loc"][-1]), message=e["msg"], rejected_value=e.get("input"))
        for e in errors
    ]
    return error_response(request, 400, MSG_VALIDATION, validation_errors=violations)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        _LOG.warning("No route for %s %s", request.method, request.url.path)
        return error_response(request, 404, f"Endpoint não encontrado: {request.url.replace(query='')}")
    _LOG.warning("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return error_response(request, exc.status_code, str(exc.detail), headers=exc.headers)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    _LOG.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, 500, MSG_INTERNAL)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceNotFoundError, handle_not_found)
    app.add_exception_handler(BusinessRuleError, handle_business_rule)
    app.add_exception_handler(InvalidDataError, handle_invalid_data)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)


def _param_error_message(error: dict[str, Any]) -> str:
    name = error["loc"][-1]
    if error["type"] == "missing":
        return f"Parâmetro obrigatório ausente: '{name}'"
    expected = _EXPECTED_TYPES.get(error["type"], "desconhecido")
    return f"Valor '{error.get('input')}' inválido para o parâmetro '{name}'. Tipo esperado: {expected}"
