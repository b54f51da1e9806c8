import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kosmos.db import get_db
from kosmos.models.project_member import ProjectMembership
from kosmos.rbac.deps import ProjectContext, get_project_context
from kosmos.rbac.perms import Permission
from kosmos.schemas.members import MemberAddIn, MemberOut, OverrideIn, PermissionItemOut, RoleChangeIn
from kosmos.services.members import MembershipService

router = APIRouter(prefix="/projects/{project_id}/members", tags=["members"])

def _out(m: ProjectMembership) -> MemberOut:
    return MemberOut(
        user_id=m.user_id,
        project_id=m.project_id,
        role=m.role,
        is_active=m.is_active,
        invited_by=m.invited_by,
        custom_permissions=m.custom_permissions,
    )

@router.get("", response_model=list[MemberOut])
def list_members(
    project_id: uuid.UUID,
    include_inactive: bool = False,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> list[MemberOut]:
    rows = MembershipService(db).list_members(project_id, ctx.user.id, include_inactive=include_inactive)
    return [_out(m) for m in rows]

@router.post("", response_model=MemberOut)
def add_member(
    project_id: uuid.UUID,
    payload: MemberAddIn,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> MemberOut:
    m = MembershipService(db).add_member(project_id, ctx.user.id, payload.user_id, payload.role)
    db.commit()
    return _out(m)

@router.patch("/{user_id}", response_model=MemberOut)
def change_role(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: RoleChangeIn,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> MemberOut:
    m = MembershipService(db).change_role(project_id, ctx.user.id, user_id, payload.role)
    db.commit()
    return _out(m)

@router.delete("/{user_id}")
def remove_member(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> dict:
    MembershipService(db).remove_member(project_id, ctx.user.id, user_id)
    db.commit()
    return {"removed": True}

@router.put("/{user_id}/overrides/{permission}", response_model=MemberOut)
def set_override(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    permission: Permission,
    payload: OverrideIn,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> MemberOut:
    m = MembershipService(db).set_override(
        project_id, ctx.user.id, user_id, permission, payload.granted
    )
    db.commit()
    return _out(m)

@router.get("/{user_id}/permissions", response_model=dict[str, list[PermissionItemOut]])
def member_permissions(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    ctx: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
) -> dict[str, list[PermissionItemOut]]:
    summary = MembershipService(db).permission_summary(project_id, ctx.user.id, user_id)
    return {
        category: [
            PermissionItemOut(permission=i.permission, granted=i.granted, description=i.description)
            for i in items
        ]
        for category, items in summary.items()
    }
