import pytest
from sqlalchemy.orm import Session

from conftest import add_membership, make_user
from kosmos.models.enums import TaskStatus
from kosmos.rbac.errors import PermissionDenied, RoleHierarchyViolation
from kosmos.rbac.roles import ProjectRole
from kosmos.services.errors import MemberNotFound
from kosmos.services.tasks import TaskService

ADMIN, MANAGER, MEMBER = ProjectRole.admin, ProjectRole.manager, ProjectRole.member

@pytest.fixture()
def svc(db_session: Session) -> TaskService:
    return TaskService(db_session)

@pytest.fixture()
def team(db_session, project):
    owner = make_user(db_session, "owner")
    add_membership(db_session, project, owner, MEMBER)
    other = make_user(db_session, "other")
    add_membership(db_session, project, other, MEMBER)
    manager = make_user(db_session, "manager")
    add_membership(db_session, project, manager, MANAGER)
    return owner, other, manager

def test_member_cannot_take_over_foreign_task(svc, db_session, project, team):
    owner, thief, _ = team
    t = svc.create_task(project.id, owner.id, "owner's task")

    with pytest.raises(PermissionDenied):
        svc.update_task(project.id, thief.id, t.id, title="hijacked")
    with pytest.raises(PermissionDenied):
        svc.update_task(project.id, thief.id, t.id, assigned_to=thief.id)

    db_session.refresh(t)
    assert t.assigned_to is None
    assert t.title == "owner's task"

    # the earlier denial leaves no foothold for a follow-up edit
    with pytest.raises(PermissionDenied):
        svc.update_task(project.id, thief.id, t.id, status=TaskStatus.done)

def test_denied_reassign_writes_nothing(svc, db_session, project, team):
    owner, thief, _ = team
    t = svc.create_task(project.id, owner.id, "owner's task")

    # title alone would be fine for the creator, but the combined update is rejected
    with pytest.raises(PermissionDenied):
        svc.update_task(project.id, owner.id, t.id, title="renamed", assigned_to=thief.id)

    db_session.refresh(t)
    assert t.title == "owner's task"
    assert t.assigned_to is None

def test_creator_may_take_own_task(svc, project, team):
    owner, _, _ = team
    t = svc.create_task(project.id, owner.id, "mine")
    assert svc.update_task(project.id, owner.id, t.id, assigned_to=owner.id).assigned_to == owner.id
    assert svc.update_task(project.id, owner.id, t.id, assigned_to=None).assigned_to is None

def test_manager_reassigns_any_task(svc, project, admin_user, team):
    owner, other, manager = team
    t = svc.create_task(project.id, owner.id, "t")

    assert svc.update_task(project.id, manager.id, t.id, assigned_to=other.id).assigned_to == other.id
    assert svc.update_task(project.id, manager.id, t.id, assigned_to=manager.id).assigned_to == manager.id

    with pytest.raises(RoleHierarchyViolation):
        svc.update_task(project.id, manager.id, t.id, assigned_to=admin_user.id)

def test_reassign_to_non_member(svc, db_session, project, team):
    _, _, manager = team
    t = svc.create_task(project.id, manager.id, "t")

    with pytest.raises(MemberNotFound):
        svc.update_task(project.id, manager.id, t.id, assigned_to=make_user(db_session).id)

def test_unchanged_assignee_needs_no_rights(svc, project, team):
    owner, other, manager = team
    t = svc.create_task(project.id, manager.id, "t", assigned_to=other.id)

    # resending the current assignee is not a reassignment
    updated = svc.update_task(project.id, other.id, t.id, status=TaskStatus.done, assigned_to=other.id)
    assert updated.status == TaskStatus.done

    with pytest.raises(PermissionDenied):
        svc.update_task(project.id, owner.id, t.id, assigned_to=other.id, title="x")
