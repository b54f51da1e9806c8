import uuid
from pydantic import BaseModel

from kosmos.rbac.perms import Permission
from kosmos.rbac.roles import ProjectRole

class MemberAddIn(BaseModel):
    user_id: uuid.UUID
    role: ProjectRole = ProjectRole.member

class RoleChangeIn(BaseModel):
    role: ProjectRole

class OverrideIn(BaseModel):
    # null clears the override
    granted: bool | None

class MemberOut(BaseModel):
    user_id: uuid.UUID
    project_id: uuid.UUID
    role: ProjectRole
    is_active: bool
    invited_by: uuid.UUID | None = None
    custom_permissions: dict[str, bool] | None = None

class PermissionItemOut(BaseModel):
    permission: Permission
    granted: bool
    description: str

class PermissionCatalogItem(BaseModel):
    permission: Permission
    description: str
    high_risk: bool

class RoleOut(BaseModel):
    role: ProjectRole
    weight: int
    display_name: str
    color: str
    permissions: list[Permission]
