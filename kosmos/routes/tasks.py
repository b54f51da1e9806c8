import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kosmos.db import get_db
from kosmos.models.task import Task
from kosmos.rbac.deps import ProjectContext, get_project_context
from kosmos.schemas.tasks import TaskCreateIn, TaskOut, TaskUpdateIn
from kosmos.services.tasks import UNSET, TaskService

router = APIRouter(prefix="/projects/{project_id}/tasks", tags=["tasks"])

def _out(t: Task) -> TaskOut:
    return TaskOut(
        id=t.id,
        project_id=t.project_id,
        title=t.title,
        status=t.status,
        priority=t.priority,
        created_by=t.created_by,
        assigned_to=t.assigned_to,
    )

@router.post("", response_model=TaskOut)
def create_task(
    project_id: uuid.UUID,
    payload: TaskCreateIn,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> TaskOut:
    t = TaskService(db).create_task(
        project_id,
        ctx.user.id,
        title=payload.title,
        assigned_to=payload.assigned_to,
        priority=payload.priority,
    )
    db.commit()
    db.refresh(t)
    return _out(t)

@router.get("", response_model=list[TaskOut])
def list_tasks(
    project_id: uuid.UUID,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> list[TaskOut]:
    return [_out(t) for t in TaskService(db).list_tasks(project_id, ctx.user.id)]

@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    payload: TaskUpdateIn,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> TaskOut:
    # allow explicit unassign by sending null
    assigned_to = payload.assigned_to if "assigned_to" in payload.model_fields_set else UNSET

    t = TaskService(db).update_task(
        project_id,
        ctx.user.id,
        task_id,
        title=payload.title,
        status=payload.status,
        priority=payload.priority,
        assigned_to=assigned_to,
    )
    db.commit()
    db.refresh(t)
    return _out(t)

@router.delete("/{task_id}")
def delete_task(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> dict:
    TaskService(db).delete_task(project_id, ctx.user.id, task_id)
    db.commit()
    return {"deleted": True}
