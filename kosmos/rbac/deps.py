import uuid

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from kosmos.config import settings
from kosmos.db import get_db
from kosmos.logging import bind_request_context
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.models.user import User
from kosmos.rbac.checker import permission_checker
from kosmos.rbac.member import ProjectMember, parse_permission
from kosmos.rbac.perms import Permission

class ProjectContext:
    def __init__(self, project: Project, membership: ProjectMembership, user: User):
        self.project = project
        self.membership = membership
        self.user = user
        self.member = ProjectMember.from_row(membership)

def get_current_user(
    x_user_id: str | None = Header(default=None, alias=settings.user_id_header),
    db: Session = Depends(get_db),
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="missing user id")

    try:
        uid = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="invalid user id")

    user = db.get(User, uid)
    if user is None:
        raise HTTPException(status_code=401, detail="user not found")

    bind_request_context(user_id=str(user.id))
    return user

def get_project_context(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectContext:
    project = db.get(Project, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="project not found")

    membership = db.scalar(
        select(ProjectMembership).where(
            ProjectMembership.project_id == project_id,
            ProjectMembership.user_id == user.id,
        )
    )
    if membership is None or not membership.is_active:
        raise HTTPException(status_code=403, detail="not a member of this project")

    bind_request_context(project_id=str(project_id))
    return ProjectContext(project=project, membership=membership, user=user)

def require_perm(permission: Permission | str):
    # unknown identifiers fail at import time, not per request
    permission = parse_permission(permission)

    def _checker(ctx: ProjectContext = Depends(get_project_context)) -> ProjectContext:
        if not permission_checker.has_permission(ctx.member, permission):
            raise HTTPException(status_code=403, detail="forbidden")
        return ctx

    return _checker
