from datetime import timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, col, select

from .models import Task, utcnow


def create_task(session: Session, task: Task) -> Task:
    now = utcnow()
    task.created_at = now
    task.updated_at = now
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def list_tasks(
    session: Session,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Task]:
    """All tasks matching every given filter, newest first."""
    stmt = select(Task)
    if status:
        stmt = stmt.where(Task.status == status)
    if priority:
        stmt = stmt.where(Task.priority == priority)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(col(Task.title).ilike(pattern), col(Task.description).ilike(pattern)))
    stmt = stmt.order_by(col(Task.created_at).desc(), col(Task.id).desc())
    return list(session.exec(stmt).all())


def get_task(session: Session, task_id: int) -> Optional[Task]:
    return session.get(Task, task_id)


def update_task(session: Session, task_id: int, changes: dict) -> Optional[Task]:
    """
    Apply `changes` to a task. Keys whose value is None are ignored, so a
    partial body leaves every other column alone.
    """
    task = session.get(Task, task_id)
    if task is None:
        return None
    for field, value in changes.items():
        if value is not None:
            setattr(task, field, value)

    now = utcnow()
    if now <= task.updated_at:
        now = task.updated_at + timedelta(microseconds=1)
    task.updated_at = now

    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def delete_task(session: Session, task_id: int) -> Optional[Task]:
    task = session.get(Task, task_id)
    if task is None:
        return None
    deleted = Task(**task.model_dump())
    session.delete(task)
    session.commit()
    return deleted
