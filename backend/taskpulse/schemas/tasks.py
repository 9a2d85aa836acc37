from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.models import TaskPriority, TaskStatus

class TaskIn(BaseModel):
    # title is checked in the route so a missing or blank one gets the same message
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    updated_at: datetime

class TaskDeleted(BaseModel):
    message: str
    task: TaskOut
