# tests/test_tasks.py

from datetime import date

import pytest

from taskmanager.errors import NotFoundError, ValidationError
from taskmanager.models import Task, User
from taskmanager.schemas import TaskCreate, TaskUpdate
from taskmanager.tasks import TaskService


@pytest.fixture()
def service(db) -> TaskService:
    return TaskService(db)


def new_task(service: TaskService, user: User, **fields) -> Task:
    fields.setdefault("title", "Buy milk")
    return service.create(user.id, TaskCreate(**fields))


def test_create_applies_defaults(service, alice) -> None:
    task = new_task(service, alice, title="  Buy milk  ")

    assert task.id is not None
    assert task.title == "Buy milk"
    assert task.description == ""
    assert task.completed is False
    assert task.due_date is None
    assert task.priority is None
    assert task.user_id == alice.id
    assert task.created_at is not None and task.updated_at is not None


def test_create_parses_optional_fields(service, alice) -> None:
    task = new_task(service, alice, description=" notes ", due_date="2026-11-01", priority="HIGH")

    assert task.description == "notes"
    assert task.due_date == date(2026, 11, 1)
    assert task.priority == "high"


@pytest.mark.parametrize("title", [None, "", "   "])
def test_create_requires_title(service, alice, title) -> None:
    with pytest.raises(ValidationError, match="Title is required"):
        service.create(alice.id, TaskCreate(title=title))


def test_create_rejects_bad_due_date_and_priority(service, alice) -> None:
    with pytest.raises(ValidationError, match="Invalid due date format"):
        new_task(service, alice, due_date="next week")
    with pytest.raises(ValidationError, match="Invalid priority"):
        new_task(service, alice, priority="urgent")


def test_list_is_newest_first_and_owner_scoped(service, alice, bob) -> None:
    first = new_task(service, alice, title="first")
    second = new_task(service, alice, title="second")
    new_task(service, bob, title="bob's")

    assert [t.id for t in service.list(alice.id)] == [second.id, first.id]
    assert [t.title for t in service.list(bob.id)] == ["bob's"]


def test_list_empty(service, alice) -> None:
    assert service.list(alice.id) == []


def test_update_changes_only_supplied_fields(service, alice) -> None:
    task = new_task(service, alice, description="keep me", priority="low", due_date="2026-11-01")

    updated = service.update(alice.id, task.id, TaskUpdate(title="Buy oat milk"))

    assert updated.title == "Buy oat milk"
    assert updated.description == "keep me"
    assert updated.priority == "low"
    assert updated.due_date == date(2026, 11, 1)


def test_update_null_or_empty_clears_due_date_and_priority(service, alice) -> None:
    task = new_task(service, alice, priority="low", due_date="2026-11-01")

    updated = service.update(alice.id, task.id, TaskUpdate(due_date=None, priority=""))

    assert updated.due_date is None
    assert updated.priority is None


def test_update_completed_is_idempotent(service, alice) -> None:
    task = new_task(service, alice)

    once = service.update(alice.id, task.id, TaskUpdate(completed=True))
    assert once.completed is True
    twice = service.update(alice.id, task.id, TaskUpdate(completed=True))
    assert twice.completed is True

    reopened = service.update(alice.id, task.id, TaskUpdate(completed=False))
    assert reopened.completed is False


def test_update_refreshes_updated_at(service, alice) -> None:
    task = new_task(service, alice)
    before = task.updated_at

    updated = service.update(alice.id, task.id, TaskUpdate(completed=False))

    assert updated.updated_at >= before
    assert updated.created_at == task.created_at


def test_update_validates_before_writing(service, alice) -> None:
    task = new_task(service, alice, priority="low")

    with pytest.raises(ValidationError):
        service.update(alice.id, task.id, TaskUpdate(title="changed", priority="urgent"))

    assert service.get_owned_task(alice.id, task.id).title == "Buy milk"


def test_update_rejects_blank_title_and_null_completed(service, alice) -> None:
    task = new_task(service, alice)
    with pytest.raises(ValidationError, match="Title is required"):
        service.update(alice.id, task.id, TaskUpdate(title="  "))
    with pytest.raises(ValidationError):
        service.update(alice.id, task.id, TaskUpdate(completed=None))


def test_update_ignores_fields_outside_the_accepted_set(service, alice, bob) -> None:
    task = new_task(service, alice)

    body = TaskUpdate.model_validate({"userId": bob.id, "id": 999, "title": "mine"})
    updated = service.update(alice.id, task.id, body)

    assert updated.id == task.id
    assert updated.user_id == alice.id
    assert updated.title == "mine"


def test_other_users_task_is_not_found(service, alice, bob) -> None:
    task = new_task(service, alice)

    with pytest.raises(NotFoundError, match="Task not found"):
        service.update(bob.id, task.id, TaskUpdate(completed=True))
    with pytest.raises(NotFoundError, match="Task not found"):
        service.delete(bob.id, task.id)

    assert service.get_owned_task(alice.id, task.id).completed is False


def test_delete(service, alice) -> None:
    task_id = new_task(service, alice).id
    service.delete(alice.id, task_id)

    assert service.list(alice.id) == []
    with pytest.raises(NotFoundError):
        service.delete(alice.id, task_id)


def test_deleting_user_cascades_to_tasks(service, db, alice, bob) -> None:
    new_task(service, alice)
    new_task(service, alice)
    new_task(service, bob)
    alice_id = alice.id

    db.delete(alice)
    db.commit()

    assert db.query(Task).filter(Task.user_id == alice_id).count() == 0
    assert db.query(Task).count() == 1
