import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from kosmos.db import get_db
from kosmos.logging import get_logger
from kosmos.models.enums import ProjectStatus
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.models.task import Task
from kosmos.models.user import User
from kosmos.rbac.deps import ProjectContext, get_current_user, require_perm
from kosmos.rbac.perms import Permission
from kosmos.schemas.projects import ProjectCreateIn, ProjectOut, ProjectUpdateIn
from kosmos.services.members import MembershipService

router = APIRouter(prefix="/projects", tags=["projects"])
logger = get_logger(__name__)

def _out(p: Project) -> ProjectOut:
    return ProjectOut(id=p.id, owner_id=p.owner_id, name=p.name, description=p.description, status=p.status)

@router.post("", response_model=ProjectOut)
def create_project(
    payload: ProjectCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectOut:
    p = MembershipService(db).create_project(user.id, payload.name, payload.description)
    db.commit()
    db.refresh(p)
    return _out(p)

@router.get("", response_model=list[ProjectOut])
def list_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    q = (
        select(Project)
        .join(ProjectMembership, ProjectMembership.project_id == Project.id)
        .where(ProjectMembership.user_id == user.id, ProjectMembership.is_active.is_(True))
        .order_by(Project.created_at.desc())
    )
    return [_out(p) for p in db.scalars(q).all()]

@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm(Permission.project_view)),
) -> ProjectOut:
    return _out(ctx.project)

@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdateIn,
    ctx: ProjectContext = Depends(require_perm(Permission.project_edit)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    p = ctx.project
    if payload.name is not None:
        p.name = payload.name
    if payload.description is not None:
        p.description = payload.description
    db.add(p)
    db.commit()
    db.refresh(p)
    return _out(p)

def _set_status(p: Project, status: ProjectStatus, db: Session) -> ProjectOut:
    p.status = status
    db.add(p)
    db.commit()
    db.refresh(p)
    logger.info("project status changed", project_id=str(p.id), status=status.value)
    return _out(p)

@router.post("/{project_id}/archive", response_model=ProjectOut)
def archive_project(
    project_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm(Permission.project_archive)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    return _set_status(ctx.project, ProjectStatus.archived, db)

@router.post("/{project_id}/restore", response_model=ProjectOut)
def restore_project(
    project_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm(Permission.project_archive)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    return _set_status(ctx.project, ProjectStatus.active, db)

@router.delete("/{project_id}")
def delete_project(
    project_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm(Permission.project_delete)),
    db: Session = Depends(get_db),
) -> dict:
    db.execute(delete(Task).where(Task.project_id == project_id))
    db.execute(delete(ProjectMembership).where(ProjectMembership.project_id == project_id))
    db.delete(ctx.project)
    db.commit()

    logger.info("project deleted", project_id=str(project_id), deleted_by=str(ctx.user.id))
    return {"deleted": True}
