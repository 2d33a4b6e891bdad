import logging
from sqlalchemy.orm import Session

from taskmanager.errors import NotFoundError, ValidationError
from taskmanager.models import Task, utcnow
from taskmanager.schemas import TaskCreate, TaskUpdate
from taskmanager.utils import parse_due_date, parse_priority, validate_task_title

logger = logging.getLogger(__name__)


class TaskService:
    """CRUD over tasks, always scoped to the acting user."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_task(self, user_id: int, task_id: int) -> Task:
        # a task owned by someone else looks exactly like a missing one
        task = self.db.query(Task).filter(
            Task.id == task_id,
            Task.user_id == user_id
        ).first()

        if not task:
            raise NotFoundError("Task not found")
        return task

    def list(self, user_id: int) -> list[Task]:
        return self.db.query(Task).filter(
            Task.user_id == user_id
        ).order_by(Task.created_at.desc(), Task.id.desc()).all()

    def create(self, user_id: int, data: TaskCreate) -> Task:
        if not validate_task_title(data.title):
            raise ValidationError("Title is required")

        task = Task(
            title=data.title.strip(),
            description=(data.description or "").strip(),
            due_date=parse_due_date(data.due_date),
            priority=parse_priority(data.priority),
            completed=False,
            user_id=user_id,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        logger.info(f"Created task {task.id} for user {user_id}")
        return task

    def update(self, user_id: int, task_id: int, data: TaskUpdate) -> Task:
        task = self.get_owned_task(user_id, task_id)
        fields = data.supplied()

        # validate everything before touching the row
        changes = {}
        if "title" in fields:
            if not validate_task_title(fields["title"]):
                raise ValidationError("Title is required")
            changes["title"] = fields["title"].strip()
        if "description" in fields:
            changes["description"] = fields["description"] or ""
        if "completed" in fields:
            if fields["completed"] is None:
                raise ValidationError("Completed must be true or false")
            changes["completed"] = fields["completed"]
        if "due_date" in fields:
            changes["due_date"] = parse_due_date(fields["due_date"])
        if "priority" in fields:
            changes["priority"] = parse_priority(fields["priority"])

        for name, value in changes.items():
            setattr(task, name, value)
        task.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(task)

        logger.info(f"Updated task {task.id} for user {user_id}: {sorted(changes)}")
        return task

    def delete(self, user_id: int, task_id: int) -> None:
        task = self.get_owned_task(user_id, task_id)
        self.db.delete(task)
        self.db.commit()

        logger.info(f"Deleted task {task_id} for user {user_id}")
