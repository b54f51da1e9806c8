"""Role transition rules.

Every function here is pure: callers pass a consistent snapshot of the
project's members and get back a decision. Nothing is written or cached.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from kosmos.rbac.errors import InvariantViolation, LastAdminViolation
from kosmos.rbac.member import ProjectMember, parse_role
from kosmos.rbac.roles import ProjectRole

@dataclass(frozen=True)
class ValidationResult:
    violation: InvariantViolation | None = None

    @property
    def ok(self) -> bool:
        return self.violation is None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_violation(self) -> None:
        if self.violation is not None:
            raise self.violation

OK = ValidationResult()

class RoleValidator:
    def can_assign(self, assigner_role: ProjectRole, target_role: ProjectRole) -> bool:
        assigner_role = parse_role(assigner_role)
        target_role = parse_role(target_role)

        # members hold no assignment rights, not even to their own level
        if assigner_role == ProjectRole.member:
            return False
        if target_role == ProjectRole.admin:
            return assigner_role == ProjectRole.admin
        return assigner_role.at_least(target_role)

    def can_manage(self, actor_role: ProjectRole, target_role: ProjectRole) -> bool:
        return parse_role(actor_role).outranks(parse_role(target_role))

    def can_assign_task(self, assigner_role: ProjectRole, assignee_role: ProjectRole) -> bool:
        return parse_role(assigner_role).at_least(parse_role(assignee_role))

    def can_invite(self, inviter_role: ProjectRole) -> bool:
        return parse_role(inviter_role) in (ProjectRole.admin, ProjectRole.manager)

    def can_remove_member(
        self, members: Sequence[ProjectMember], target: ProjectMember
    ) -> ValidationResult:
        if parse_role(target.role) != ProjectRole.admin:
            return OK
        if self._other_active_admins(members, target) == 0:
            return ValidationResult(LastAdminViolation())
        return OK

    def can_change_role(
        self, members: Sequence[ProjectMember], target: ProjectMember, new_role: ProjectRole
    ) -> ValidationResult:
        if parse_role(new_role) == ProjectRole.admin:
            return OK
        return self.can_remove_member(members, target)

    def _other_active_admins(self, members: Iterable[ProjectMember], target: ProjectMember) -> int:
        return sum(
            1
            for m in members
            if parse_role(m.role) == ProjectRole.admin and m.is_active and m.key != target.key
        )

    def has_admin(self, members: Iterable[ProjectMember]) -> bool:
        return any(m.role == ProjectRole.admin and m.is_active for m in members)

    def highest_role(self, members: Iterable[ProjectMember]) -> ProjectRole | None:
        roles = [m.role for m in members]
        if not roles:
            return None
        return max(roles, key=lambda r: r.weight)

    def assignable_members(
        self, assigner_role: ProjectRole, members: Iterable[ProjectMember]
    ) -> list[ProjectMember]:
        return [m for m in members if m.is_active and self.can_assign_task(assigner_role, m.role)]

role_validator = RoleValidator()
