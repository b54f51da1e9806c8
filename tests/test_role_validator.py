import uuid

import pytest

from kosmos.rbac.errors import ConfigurationError, LastAdminViolation
from kosmos.rbac.member import ProjectMember
from kosmos.rbac.roles import ProjectRole
from kosmos.rbac.validator import RoleValidator

ADMIN, MANAGER, MEMBER = ProjectRole.admin, ProjectRole.manager, ProjectRole.member

PROJECT_ID = uuid.uuid4()

def member(role: ProjectRole, is_active: bool = True) -> ProjectMember:
    return ProjectMember(project_id=PROJECT_ID, user_id=uuid.uuid4(), role=role, is_active=is_active)

@pytest.fixture()
def validator() -> RoleValidator:
    return RoleValidator()

ASSIGN_TABLE = [
    (ADMIN, ADMIN, True),
    (ADMIN, MANAGER, True),
    (ADMIN, MEMBER, True),
    (MANAGER, ADMIN, False),
    (MANAGER, MANAGER, True),
    (MANAGER, MEMBER, True),
    (MEMBER, ADMIN, False),
    (MEMBER, MANAGER, False),
    (MEMBER, MEMBER, False),
]

@pytest.mark.parametrize("assigner,target,expected", ASSIGN_TABLE)
def test_can_assign_truth_table(validator, assigner, target, expected):
    assert validator.can_assign(assigner, target) is expected

def test_can_assign_accepts_persisted_strings(validator):
    assert validator.can_assign("ADMIN", "MANAGER") is True
    assert validator.can_assign("MANAGER", "ADMIN") is False

def test_can_assign_unknown_role_is_configuration_error(validator):
    with pytest.raises(ConfigurationError):
        validator.can_assign("OWNER", MEMBER)
    with pytest.raises(ConfigurationError):
        validator.can_assign(ADMIN, 3)
    # persisted values are exact; no case folding or trimming
    with pytest.raises(ConfigurationError):
        validator.can_assign("admin ", MEMBER)

def test_weights():
    assert (ADMIN.weight, MANAGER.weight, MEMBER.weight) == (3, 2, 1)

def test_can_manage_requires_strictly_higher(validator):
    assert validator.can_manage(ADMIN, MANAGER)
    assert not validator.can_manage(ADMIN, ADMIN)
    assert not validator.can_manage(MANAGER, ADMIN)

def test_can_assign_task_allows_equal(validator):
    assert validator.can_assign_task(ADMIN, ADMIN)
    assert validator.can_assign_task(MEMBER, MEMBER)
    assert not validator.can_assign_task(MEMBER, MANAGER)

def test_can_invite(validator):
    assert validator.can_invite(ADMIN)
    assert validator.can_invite(MANAGER)
    assert not validator.can_invite(MEMBER)

def test_sole_admin_cannot_be_removed_or_demoted(validator):
    a = member(ADMIN)
    members = [a, member(MANAGER), member(MEMBER)]

    removed = validator.can_remove_member(members, a)
    assert not removed.ok
    assert isinstance(removed.violation, LastAdminViolation)

    for new_role in (MANAGER, MEMBER):
        changed = validator.can_change_role(members, a, new_role)
        assert not changed
        assert isinstance(changed.violation, LastAdminViolation)

def test_any_of_two_admins_can_be_removed_or_demoted(validator):
    a1, a2 = member(ADMIN), member(ADMIN)
    members = [a1, a2, member(MEMBER)]

    for target in (a1, a2):
        assert validator.can_remove_member(members, target).ok
        assert validator.can_change_role(members, target, MEMBER).ok

def test_inactive_admins_do_not_count(validator):
    a = member(ADMIN)
    members = [a, member(ADMIN, is_active=False)]
    assert not validator.can_remove_member(members, a)

def test_promoting_to_admin_never_violates(validator):
    a = member(ADMIN)
    assert validator.can_change_role([a], a, ADMIN).ok

def test_non_admin_removal_always_allowed(validator):
    a, b = member(ADMIN), member(MANAGER)
    assert validator.can_remove_member([a, b], b).ok
    assert validator.can_change_role([a, b], b, MEMBER).ok

def test_raise_for_violation(validator):
    a = member(ADMIN)
    with pytest.raises(LastAdminViolation, match="last admin"):
        validator.can_remove_member([a], a).raise_for_violation()

    # success is a no-op
    validator.can_remove_member([a, member(ADMIN)], a).raise_for_violation()

def test_scenario_admin_and_manager(validator):
    a, b = member(ADMIN), member(MANAGER)

    assert isinstance(validator.can_remove_member([a, b], a).violation, LastAdminViolation)
    assert validator.can_remove_member([a, b], b).ok
    assert validator.can_assign(MANAGER, ADMIN) is False
    assert validator.can_assign(ADMIN, MANAGER) is True

def test_helpers(validator):
    a, b, c = member(ADMIN), member(MANAGER), member(MEMBER, is_active=False)

    assert validator.has_admin([a, b])
    assert not validator.has_admin([b, c])
    assert not validator.has_admin([member(ADMIN, is_active=False)])

    assert validator.highest_role([b, c]) == MANAGER
    assert validator.highest_role([]) is None

    assert validator.assignable_members(MANAGER, [a, b, c]) == [b]
