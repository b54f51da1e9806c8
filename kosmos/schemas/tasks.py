import uuid
from pydantic import BaseModel

from kosmos.models.enums import TaskPriority, TaskStatus

class TaskCreateIn(BaseModel):
    title: str
    assigned_to: uuid.UUID | None = None
    priority: TaskPriority = TaskPriority.medium

class TaskUpdateIn(BaseModel):
    title: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: uuid.UUID | None = None

class TaskOut(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    status: TaskStatus
    priority: TaskPriority
    created_by: uuid.UUID
    assigned_to: uuid.UUID | None
