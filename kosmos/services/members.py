import uuid

from sqlalchemy.exc import IntegrityError

from kosmos.logging import get_logger
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.models.user import User
from kosmos.rbac.checker import PermissionSummaryItem
from kosmos.rbac.errors import RoleHierarchyViolation
from kosmos.rbac.member import dump_overrides, parse_permission, parse_role
from kosmos.rbac.perms import Permission
from kosmos.rbac.roles import ProjectRole
from kosmos.services.base import ProjectScopedService
from kosmos.services.errors import AlreadyMember, MemberNotFound, UserNotFound

logger = get_logger(__name__)

class MembershipService(ProjectScopedService):
    """Member mutations for one project.

    Each mutation locks the project's member rows, asks the checker and
    validator, and only then writes. Nothing is committed here; the caller
    owns the transaction.
    """

    def create_project(self, owner_id: uuid.UUID, name: str, description: str | None = None) -> Project:
        """Create a project with its creator as the first ADMIN."""
        if self.db.get(User, owner_id) is None:
            raise UserNotFound()

        p = Project(name=name, description=description, owner_id=owner_id)
        self.db.add(p)
        self.db.flush()

        self.db.add(ProjectMembership(project_id=p.id, user_id=owner_id, role=ProjectRole.admin))
        self.db.flush()

        logger.info("project created", project_id=str(p.id), owner_id=str(owner_id))
        return p

    def get_member(self, project_id: uuid.UUID, user_id: uuid.UUID) -> ProjectMembership:
        row = self.find(self.load_members(project_id), user_id)
        if row is None:
            raise MemberNotFound()
        return row

    def list_members(
        self, project_id: uuid.UUID, actor_id: uuid.UUID, include_inactive: bool = False
    ) -> list[ProjectMembership]:
        self.get_project(project_id)
        rows = self.load_members(project_id)
        self.require(self.actor(rows, actor_id), Permission.member_view)
        if include_inactive:
            return rows
        return [r for r in rows if r.is_active]

    def add_member(
        self,
        project_id: uuid.UUID,
        inviter_id: uuid.UUID,
        user_id: uuid.UUID,
        role: ProjectRole = ProjectRole.member,
    ) -> ProjectMembership:
        role = parse_role(role)
        self.get_project(project_id)
        rows = self.lock_members(project_id)

        inviter = self.actor(rows, inviter_id)
        self.require(inviter, Permission.member_invite)
        if not self.validator.can_assign(inviter.role, role):
            raise RoleHierarchyViolation(
                f"Cannot assign {role.display_name} role. "
                f"{inviter.role.display_name}s can only assign roles up to their own."
            )

        if self.db.get(User, user_id) is None:
            raise UserNotFound()

        existing = self.find(rows, user_id)
        if existing is not None and existing.is_active:
            raise AlreadyMember()

        if existing is not None:
            # rejoining starts from a clean slate
            existing.is_active = True
            existing.role = role
            existing.invited_by = inviter_id
            existing.custom_permissions = None
            m = existing
        else:
            m = ProjectMembership(project_id=project_id, user_id=user_id, role=role, invited_by=inviter_id)

        # the row lock does not cover inserts; a concurrent invite trips the unique constraint
        try:
            with self.db.begin_nested():
                self.db.add(m)
                self.db.flush()
        except IntegrityError:
            logger.info("member add raced", project_id=str(project_id), user_id=str(user_id))
            raise AlreadyMember() from None

        logger.info(
            "member added",
            project_id=str(project_id),
            user_id=str(user_id),
            role=role.value,
            invited_by=str(inviter_id),
        )
        return m

    def remove_member(self, project_id: uuid.UUID, actor_id: uuid.UUID, user_id: uuid.UUID) -> ProjectMembership:
        self.get_project(project_id)
        rows = self.lock_members(project_id)

        actor = self.actor(rows, actor_id)
        target = self.find(rows, user_id)
        if target is None or not target.is_active:
            raise MemberNotFound()

        # leaving a project needs no permission, only the invariant check
        if actor.user_id != target.user_id:
            self.require(actor, Permission.member_remove)
            if not self.validator.can_assign(actor.role, target.role):
                raise RoleHierarchyViolation(
                    f"Cannot remove {target.role.display_name}. "
                    "Only users with an equal or higher role can remove members."
                )

        result = self.validator.can_remove_member([self.snapshot(r) for r in rows], self.snapshot(target))
        if not result:
            logger.info("member removal rejected", project_id=str(project_id), user_id=str(user_id), reason=str(result.violation))
            result.raise_for_violation()

        target.is_active = False
        self.db.add(target)
        self.db.flush()

        logger.info("member removed", project_id=str(project_id), user_id=str(user_id), removed_by=str(actor_id))
        return target

    def change_role(
        self,
        project_id: uuid.UUID,
        actor_id: uuid.UUID,
        user_id: uuid.UUID,
        new_role: ProjectRole,
    ) -> ProjectMembership:
        new_role = parse_role(new_role)
        self.get_project(project_id)
        rows = self.lock_members(project_id)

        actor = self.actor(rows, actor_id)
        target = self.find(rows, user_id)
        if target is None or not target.is_active:
            raise MemberNotFound()

        self.require(actor, Permission.member_change_role)
        if not self.validator.can_assign(actor.role, target.role):
            raise RoleHierarchyViolation(
                f"Cannot change role of {target.role.display_name}. "
                "Only users with an equal or higher role can change member roles."
            )
        if not self.validator.can_assign(actor.role, new_role):
            raise RoleHierarchyViolation(
                f"Cannot assign {new_role.display_name} role. "
                "You can only assign roles up to your own."
            )

        if target.role == new_role:
            return target

        result = self.validator.can_change_role(
            [self.snapshot(r) for r in rows], self.snapshot(target), new_role
        )
        if not result:
            logger.info("role change rejected", project_id=str(project_id), user_id=str(user_id), reason=str(result.violation))
            result.raise_for_violation()

        old_role = target.role
        target.role = new_role
        self.db.add(target)
        self.db.flush()

        logger.info(
            "member role changed",
            project_id=str(project_id),
            user_id=str(user_id),
            old_role=old_role.value,
            new_role=new_role.value,
            changed_by=str(actor_id),
        )
        return target

    def set_override(
        self,
        project_id: uuid.UUID,
        actor_id: uuid.UUID,
        user_id: uuid.UUID,
        permission: Permission,
        granted: bool | None,
    ) -> ProjectMembership:
        """Grant, revoke, or (``granted=None``) clear one permission override."""
        permission = parse_permission(permission)
        self.get_project(project_id)
        rows = self.lock_members(project_id)

        actor = self.actor(rows, actor_id)
        target = self.find(rows, user_id)
        if target is None or not target.is_active:
            raise MemberNotFound()

        self.require(actor, Permission.member_change_role)
        if not self.validator.can_assign(actor.role, target.role):
            raise RoleHierarchyViolation(
                f"Cannot change permissions of {target.role.display_name}. "
                "Only users with an equal or higher role can change member permissions."
            )

        overrides = dict(self.snapshot(target).overrides)
        if granted is None:
            overrides.pop(permission, None)
        else:
            overrides[permission] = granted
        target.custom_permissions = dump_overrides(overrides)
        self.db.add(target)
        self.db.flush()

        logger.info(
            "permission override set",
            project_id=str(project_id),
            user_id=str(user_id),
            permission=permission.value,
            granted=granted,
            changed_by=str(actor_id),
        )
        return target

    def permission_summary(
        self, project_id: uuid.UUID, actor_id: uuid.UUID, user_id: uuid.UUID
    ) -> dict[str, list[PermissionSummaryItem]]:
        self.get_project(project_id)
        rows = self.load_members(project_id)
        actor = self.actor(rows, actor_id)
        if actor.user_id != user_id:
            self.require(actor, Permission.member_view)

        target = self.find(rows, user_id)
        if target is None:
            raise MemberNotFound()
        return self.checker.permission_summary(self.snapshot(target))

    def has_permission(self, project_id: uuid.UUID, user_id: uuid.UUID, permission: Permission) -> bool:
        row = self.find(self.load_members(project_id), user_id)
        if row is None:
            return False
        return self.checker.has_permission(self.snapshot(row), permission)
