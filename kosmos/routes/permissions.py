from fastapi import APIRouter

from kosmos.rbac.perms import PERMISSION_CATEGORIES, ROLE_PERMISSION_DEFAULTS
from kosmos.rbac.roles import ROLE_COLORS, ProjectRole
from kosmos.schemas.members import PermissionCatalogItem, RoleOut

router = APIRouter(tags=["permissions"])

@router.get("/permissions", response_model=dict[str, list[PermissionCatalogItem]])
def list_permissions() -> dict[str, list[PermissionCatalogItem]]:
    return {
        category: [
            PermissionCatalogItem(permission=p, description=p.description, high_risk=p.is_high_risk)
            for p in perms
        ]
        for category, perms in PERMISSION_CATEGORIES.items()
    }

@router.get("/roles", response_model=list[RoleOut])
def list_roles() -> list[RoleOut]:
    return [
        RoleOut(
            role=r,
            weight=r.weight,
            display_name=r.display_name,
            color=ROLE_COLORS[r],
            permissions=sorted(ROLE_PERMISSION_DEFAULTS[r], key=lambda p: p.value),
        )
        for r in sorted(ProjectRole, key=lambda r: r.weight, reverse=True)
    ]
