# tests/test_service.py
from datetime import datetime, timedelta

import pytest

from todolist.domain.errors import InvalidDataError, ResourceNotFoundError
from todolist.domain.models import TaskCreate, TaskUpdate
from todolist.domain.states import TaskStatus
from todolist.service import TaskService


@pytest.fixture()
def service(repo, clock) -> TaskService:
    return TaskService(repo, clock=clock)


def test_create_defaults_status_and_sets_both_timestamps(service: TaskService, clock):
    start = clock.current
    task = service.create(TaskCreate(titulo="Nova tarefa"))

    assert task.id is not None
    assert task.status is TaskStatus.PENDING
    assert task.description is None
    assert task.created_at == task.updated_at == start


def test_get_by_id_matches_created(service: TaskService):
    created = service.create(TaskCreate(titulo="Ler livro", descricao="cap. 3", status=TaskStatus.DONE))
    assert service.get_by_id(created.id) == created


@pytest.mark.parametrize("operation", ["get", "update", "delete"])
def test_missing_id_raises_not_found(service: TaskService, operation: str):
    with pytest.raises(ResourceNotFoundError) as info:
        if operation == "get":
            service.get_by_id(99)
        elif operation == "update":
            service.update(99, TaskUpdate(titulo="Qualquer"))
        else:
            service.delete(99)
    assert info.value.message == "Tarefa não encontrada com ID: 99"
    assert info.value.details == {"id": 99}


def test_update_overwrites_title_description_and_refreshes_updated_at(service: TaskService):
    created = service.create(TaskCreate(titulo="Original", descricao="texto", status=TaskStatus.IN_PROGRESS))

    updated = service.update(created.id, TaskUpdate(titulo="Alterado"))

    assert updated.title == "Alterado"
    assert updated.description is None
    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


def test_update_with_status_overwrites(service: TaskService):
    created = service.create(TaskCreate(titulo="Original"))
    updated = service.update(created.id, TaskUpdate(titulo="Original", status=TaskStatus.DONE))
    assert updated.status is TaskStatus.DONE


def test_updated_at_never_precedes_created_at(repo, clock):
    service = TaskService(repo, clock=clock)
    created = service.create(TaskCreate(titulo="Relógio"))

    clock.current = created.created_at - timedelta(hours=1)
    updated = service.update(created.id, TaskUpdate(titulo="Relógio"))

    assert updated.updated_at >= updated.created_at


def test_delete_is_not_repeatable(service: TaskService):
    created = service.create(TaskCreate(titulo="Apagar"))
    service.delete(created.id)

    with pytest.raises(ResourceNotFoundError):
        service.get_by_id(created.id)
    with pytest.raises(ResourceNotFoundError):
        service.delete(created.id)


def test_list_all_is_newest_first(service: TaskService):
    assert service.list_all() == []

    a = service.create(TaskCreate(titulo="A" * 3))
    b = service.create(TaskCreate(titulo="B" * 3))
    c = service.create(TaskCreate(titulo="C" * 3))

    assert [t.id for t in service.list_all()] == [c.id, b.id, a.id]


def test_list_all_breaks_timestamp_ties_by_id(repo):
    frozen = datetime(2026, 1, 6, 9, 0, 0)
    service = TaskService(repo, clock=lambda: frozen)

    ids = [service.create(TaskCreate(titulo=f"Tarefa {n}")).id for n in range(3)]

    assert [t.id for t in service.list_all()] == list(reversed(ids))


def test_list_by_status(service: TaskService):
    pending = service.create(TaskCreate(titulo="Pendente"))
    done = service.create(TaskCreate(titulo="Feita", status=TaskStatus.DONE))

    assert [t.id for t in service.list_by_status(TaskStatus.PENDING)] == [pending.id]
    assert [t.id for t in service.list_by_status(TaskStatus.DONE)] == [done.id]
    assert service.list_by_status(TaskStatus.IN_PROGRESS) == []


def test_search_escapes_like_wildcards(service: TaskService):
    service.create(TaskCreate(titulo="100% pronto"))
    service.create(TaskCreate(titulo="1000 pronto"))

    assert [t.title for t in service.search("0%")] == ["100% pronto"]
    assert len(service.search("")) == 2


def test_count_by_status(service: TaskService):
    service.create(TaskCreate(titulo="Uma"))
    service.create(TaskCreate(titulo="Dois", status=TaskStatus.IN_PROGRESS))

    assert service.count_by_status() == {
        TaskStatus.PENDING: 1,
        TaskStatus.IN_PROGRESS: 1,
        TaskStatus.DONE: 0,
    }


def test_list_created_between_is_inclusive(service: TaskService, clock):
    first = service.create(TaskCreate(titulo="Primeira"))
    second = service.create(TaskCreate(titulo="Segunda"))
    service.create(TaskCreate(titulo="Terceira"))

    found = service.list_created_between(first.created_at, second.created_at)

    assert [t.id for t in found] == [second.id, first.id]


def test_list_created_between_rejects_reversed_range(service: TaskService):
    with pytest.raises(InvalidDataError):
        service.list_created_between(datetime(2026, 2, 1), datetime(2026, 1, 1))


def test_search_ignores_case_of_accented_letters(service: TaskService):
    meeting = service.create(TaskCreate(titulo="REUNIÃO semanal"))
    service.create(TaskCreate(titulo="Reunir documentos"))

    assert [t.id for t in service.search("reunião")] == [meeting.id]
    assert [t.id for t in service.search("ÇÃO SEM")] == []
    assert [t.id for t in service.search("IÃO SEM")] == [meeting.id]
