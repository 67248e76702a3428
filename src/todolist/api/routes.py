# src/todolist/api/routes.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from todolist.domain.models import ErrorResponse, TaskCreate, TaskUpdate, TaskView
from todolist.domain.states import TaskStatus
from todolist.service import TaskService

from .deps import get_service

router = APIRouter()

tasks_router = APIRouter(
    prefix="/api/tarefas",
    tags=["Tarefas"],
    responses={500: {"model": ErrorResponse, "description": "Erro interno no servidor"}},
)

_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Dados inválidos na requisição"}}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Tarefa não encontrada"}}


@router.get("/healthz", include_in_schema=False)
def healthz() -> dict:
    return {"ok": True}


@tasks_router.post(
    "",
    response_model=TaskView,
    status_code=status.HTTP_201_CREATED,
    summary="Criar nova tarefa",
    responses=_BAD_REQUEST,
)
def create_task(
    payload: TaskCreate,
    service: TaskService = Depends(get_service),
) -> TaskView:
    """
    Creates a task. A missing status defaults to PENDENTE.
    """
    return service.create(payload)


@tasks_router.get("", response_model=list[TaskView], summary="Listar todas as tarefas")
def list_tasks(service: TaskService = Depends(get_service)) -> list[TaskView]:
    """
    All tasks, most recently created first.
    """
    return service.list_all()


# Fixed paths are declared before "/{task_id}" so they are matched first.


@tasks_router.get(
    "/status/{status}",
    response_model=list[TaskView],
    summary="Listar tarefas por status",
    responses=_BAD_REQUEST,
)
def list_tasks_by_status(
    status: TaskStatus,
    service: TaskService = Depends(get_service),
) -> list[TaskView]:
    return service.list_by_status(status)


@tasks_router.get(
    "/busca",
    response_model=list[TaskView],
    summary="Buscar tarefas pelo título",
    responses=_BAD_REQUEST,
)
def search_tasks(
    titulo: str = Query(default=""),
    status: Optional[TaskStatus] = Query(default=None),
    service: TaskService = Depends(get_service),
) -> list[TaskView]:
    """
    Case-insensitive match on part of the title, optionally filtered by status.
    """
    return service.search(titulo, status)


@tasks_router.get("/contagem", response_model=dict[str, int], summary="Contar tarefas por status")
def count_tasks(service: TaskService = Depends(get_service)) -> dict[str, int]:
    return {s.value: n for s, n in service.count_by_status().items()}


@tasks_router.get(
    "/periodo",
    response_model=list[TaskView],
    summary="Listar tarefas criadas em um período",
    responses=_BAD_REQUEST,
)
def list_tasks_created_between(
    inicio: datetime = Query(...),
    fim: datetime = Query(...),
    service: TaskService = Depends(get_service),
) -> list[TaskView]:
    return service.list_created_between(inicio, fim)


@tasks_router.get(
    "/{task_id}",
    response_model=TaskView,
    summary="Buscar tarefa por ID",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def get_task(
    task_id: int,
    service: TaskService = Depends(get_service),
) -> TaskView:
    return service.get_by_id(task_id)


@tasks_router.put(
    "/{task_id}",
    response_model=TaskView,
    summary="Atualizar tarefa",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    service: TaskService = Depends(get_service),
) -> TaskView:
    """
    Title and description are always replaced; status only when sent.
    """
    return service.update(task_id, payload)


@tasks_router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deletar tarefa",
    responses=_NOT_FOUND,
)
def delete_task(
    task_id: int,
    service: TaskService = Depends(get_service),
) -> Response:
    service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


router.include_router(tasks_router)
