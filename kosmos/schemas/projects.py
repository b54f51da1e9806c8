import uuid
from pydantic import BaseModel

from kosmos.models.enums import ProjectStatus

class ProjectCreateIn(BaseModel):
    name: str
    description: str = ""

class ProjectUpdateIn(BaseModel):
    name: str | None = None
    description: str | None = None

class ProjectOut(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    description: str
    status: ProjectStatus
