from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, String
from sqlmodel import SQLModel, Field


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


def utcnow() -> datetime:
    # naive UTC: SQLite drops tzinfo on the way back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _in(values) -> str:
    return ", ".join(f"'{v.value}'" for v in values)


class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(f"status IN ({_in(TaskStatus)})", name="ck_tasks_status"),
        CheckConstraint(f"priority IN ({_in(TaskPriority)})", name="ck_tasks_priority"),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255)
    description: Optional[str] = None
    status: str = Field(
        default=TaskStatus.todo.value,
        sa_column=Column(String(20), nullable=False, server_default=TaskStatus.todo.value),
    )
    priority: str = Field(
        default=TaskPriority.medium.value,
        sa_column=Column(String(10), nullable=False, server_default=TaskPriority.medium.value),
    )
    # naive UTC columns, see utcnow()
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
