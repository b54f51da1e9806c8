from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from kosmos.rbac.errors import ConfigurationError, PermissionDenied
from kosmos.rbac.member import ProjectMember, parse_permission, parse_role
from kosmos.rbac.perms import PERMISSION_CATEGORIES, ROLE_PERMISSION_DEFAULTS, Permission
from kosmos.rbac.roles import ProjectRole

@dataclass(frozen=True)
class PermissionSummaryItem:
    permission: Permission
    granted: bool
    description: str

class PermissionChecker:
    """Resolves whether a member may perform a permission-gated action.

    Stateless apart from the injected role defaults, which are treated as
    read-only configuration.
    """

    def __init__(self, defaults: Mapping[ProjectRole, frozenset[Permission]] = ROLE_PERMISSION_DEFAULTS):
        missing = [r for r in ProjectRole if r not in defaults]
        if missing:
            raise ConfigurationError(f"no default permissions for roles: {[r.value for r in missing]}")
        self._defaults = defaults

    def defaults_for(self, role: ProjectRole) -> frozenset[Permission]:
        return frozenset(self._defaults[parse_role(role)])

    def has_permission(self, member: ProjectMember, permission: Permission) -> bool:
        permission = parse_permission(permission)
        role = parse_role(member.role)

        if not member.is_active:
            return False

        # an explicit override can both narrow and widen the role default
        override = member.overrides.get(permission)
        if override is not None:
            return override
        return permission in self._defaults[role]

    def effective_permissions(self, member: ProjectMember) -> frozenset[Permission]:
        return frozenset(p for p in Permission if self.has_permission(member, p))

    def missing(self, member: ProjectMember, permissions: Iterable[Permission]) -> list[Permission]:
        return [p for p in permissions if not self.has_permission(member, p)]

    def has_all(self, member: ProjectMember, permissions: Iterable[Permission]) -> bool:
        return not self.missing(member, permissions)

    def has_any(self, member: ProjectMember, permissions: Iterable[Permission]) -> bool:
        return any(self.has_permission(member, p) for p in permissions)

    def require_permission(self, member: ProjectMember, permission: Permission) -> None:
        permission = parse_permission(permission)
        if self.has_permission(member, permission):
            return
        if not member.is_active:
            reason = "Your membership in this project is inactive."
        else:
            reason = (
                f"This action requires '{permission.description}' permission. "
                f"Your role ({parse_role(member.role).display_name}) does not have this permission."
            )
        raise PermissionDenied(reason, permission=permission)

    def require_all(self, member: ProjectMember, permissions: Iterable[Permission]) -> None:
        missing = self.missing(member, permissions)
        if missing:
            raise PermissionDenied(
                "Missing permissions: " + ", ".join(p.description for p in missing),
                permission=missing[0],
            )

    def permission_summary(self, member: ProjectMember) -> dict[str, list[PermissionSummaryItem]]:
        return {
            category: [
                PermissionSummaryItem(permission=p, granted=self.has_permission(member, p), description=p.description)
                for p in permissions
            ]
            for category, permissions in PERMISSION_CATEGORIES.items()
        }

permission_checker = PermissionChecker()
