import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..db.session import get_session
from ..db.models import Task, TaskPriority, TaskStatus
from ..db.crud import create_task, delete_task, get_task, list_tasks, update_task
from ..schemas.tasks import TaskDeleted, TaskIn, TaskOut, TaskUpdate

log = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

NOT_FOUND = "Task not found"

def _enum_filter(name: str, value: Optional[str], allowed) -> Optional[str]:
    if not value:
        return None
    if value not in {m.value for m in allowed}:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")
    return value

@router.get("", response_model=List[TaskOut])
def list_all(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
):
    return list_tasks(
        session,
        status=_enum_filter("status", status, TaskStatus),
        priority=_enum_filter("priority", priority, TaskPriority),
        search=search or None,
    )

@router.get("/{task_id}", response_model=TaskOut)
def get_one(task_id: int, session: Session = Depends(get_session)):
    task = get_task(session, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return task

@router.post("", response_model=TaskOut, status_code=201)
def create(body: TaskIn, session: Session = Depends(get_session)):
    if not body.title or not body.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    fields = body.model_dump(mode="json")
    fields["description"] = fields["description"] or None
    task = create_task(session, Task(**fields))
    log.info("Task created: %s - %s", task.id, task.title)
    return task

@router.put("/{task_id}", response_model=TaskOut)
def update(task_id: int, body: TaskUpdate, session: Session = Depends(get_session)):
    if body.title is not None and not body.title.strip():
        raise HTTPException(status_code=400, detail="Title cannot be empty")
    task = update_task(session, task_id, body.model_dump(mode="json", exclude_unset=True))
    if task is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    log.info("Task updated: %s", task_id)
    return task

@router.delete("/{task_id}", response_model=TaskDeleted)
def delete(task_id: int, session: Session = Depends(get_session)):
    task = delete_task(session, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    log.info("Task deleted: %s", task_id)
    return TaskDeleted(message="Task deleted", task=TaskOut.model_validate(task))
