import uuid

from conftest import auth

def create_user(client, prefix: str = "user") -> str:
    r = client.post("/users", json={"email": f"{prefix}+{uuid.uuid4().hex[:10]}@example.com"})
    assert r.status_code == 200, r.text
    return r.json()["id"]

def create_project(client, user_id: str, name: str = "p") -> str:
    r = client.post("/projects", json={"name": name}, headers=auth(user_id))
    assert r.status_code == 200, r.text
    return r.json()["id"]

def add_member(client, actor: str, project_id: str, user_id: str, role: str):
    return client.post(
        f"/projects/{project_id}/members",
        json={"user_id": user_id, "role": role},
        headers=auth(actor),
    )

def test_creator_becomes_admin(client):
    owner = create_user(client, "owner")
    project_id = create_project(client, owner)

    r = client.get(f"/projects/{project_id}/members", headers=auth(owner))
    assert r.status_code == 200
    [m] = r.json()
    assert m["user_id"] == owner
    assert m["role"] == "ADMIN"
    assert m["is_active"] is True

def test_identity_header_required(client):
    r = client.post("/projects", json={"name": "nope"})
    assert r.status_code == 401

    r = client.post("/projects", json={"name": "nope"}, headers=auth(uuid.uuid4()))
    assert r.status_code == 401

    r = client.post("/projects", json={"name": "nope"}, headers={"x-user-id": "not-a-uuid"})
    assert r.status_code == 401

def test_last_admin_is_protected(client):
    admin = create_user(client, "admin")
    manager = create_user(client, "manager")
    project_id = create_project(client, admin)

    r = add_member(client, admin, project_id, manager, "MANAGER")
    assert r.status_code == 200, r.text

    # admin cannot leave or step down while they are the only admin
    r = client.delete(f"/projects/{project_id}/members/{admin}", headers=auth(admin))
    assert r.status_code == 409
    assert "last admin" in r.json()["detail"]

    r = client.patch(f"/projects/{project_id}/members/{admin}", json={"role": "MEMBER"}, headers=auth(admin))
    assert r.status_code == 409

    # promote the manager, then stepping down is fine
    r = client.patch(f"/projects/{project_id}/members/{manager}", json={"role": "ADMIN"}, headers=auth(admin))
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "ADMIN"

    r = client.patch(f"/projects/{project_id}/members/{admin}", json={"role": "MEMBER"}, headers=auth(admin))
    assert r.status_code == 200, r.text

    # removing the manager-turned-admin is now blocked
    r = client.delete(f"/projects/{project_id}/members/{manager}", headers=auth(manager))
    assert r.status_code == 409

def test_role_escalation_denied(client):
    admin = create_user(client, "admin")
    manager = create_user(client, "manager")
    member = create_user(client, "member")
    project_id = create_project(client, admin)

    assert add_member(client, admin, project_id, manager, "MANAGER").status_code == 200
    assert add_member(client, admin, project_id, member, "MEMBER").status_code == 200

    # manager can invite up to manager, never admin
    r = add_member(client, manager, project_id, create_user(client), "ADMIN")
    assert r.status_code == 403
    r = add_member(client, manager, project_id, create_user(client), "MANAGER")
    assert r.status_code == 200, r.text

    # members cannot invite at all
    r = add_member(client, member, project_id, create_user(client), "MEMBER")
    assert r.status_code == 403

    # only admins change roles by default
    r = client.patch(f"/projects/{project_id}/members/{member}", json={"role": "MANAGER"}, headers=auth(manager))
    assert r.status_code == 403

    # duplicate invite
    r = add_member(client, admin, project_id, member, "MEMBER")
    assert r.status_code == 409

def test_overrides_via_api(client):
    admin = create_user(client, "admin")
    member = create_user(client, "member")
    project_id = create_project(client, admin)
    assert add_member(client, admin, project_id, member, "MEMBER").status_code == 200

    r = client.put(
        f"/projects/{project_id}/members/{member}/overrides/task.assign",
        json={"granted": True},
        headers=auth(admin),
    )
    assert r.status_code == 200, r.text
    assert r.json()["custom_permissions"] == {"task.assign": True}

    r = client.get(f"/projects/{project_id}/members/{member}/permissions", headers=auth(member))
    assert r.status_code == 200
    tasks = {i["permission"]: i["granted"] for i in r.json()["Task Management"]}
    assert tasks["task.assign"] is True
    assert tasks["task.delete_any"] is False

    # members cannot touch overrides
    r = client.put(
        f"/projects/{project_id}/members/{admin}/overrides/project.delete",
        json={"granted": False},
        headers=auth(member),
    )
    assert r.status_code == 403

    # unknown identifiers are rejected by validation
    r = client.put(
        f"/projects/{project_id}/members/{member}/overrides/project.manage",
        json={"granted": True},
        headers=auth(admin),
    )
    assert r.status_code == 422

def test_non_member_is_forbidden(client):
    admin = create_user(client, "admin")
    outsider = create_user(client, "outsider")
    project_id = create_project(client, admin)

    assert client.get(f"/projects/{project_id}", headers=auth(outsider)).status_code == 403
    assert client.get(f"/projects/{project_id}/members", headers=auth(outsider)).status_code == 403
    assert client.get(f"/projects/{uuid.uuid4()}", headers=auth(outsider)).status_code == 404

def test_removed_member_loses_access(client):
    admin = create_user(client, "admin")
    member = create_user(client, "member")
    project_id = create_project(client, admin)
    assert add_member(client, admin, project_id, member, "MEMBER").status_code == 200

    assert client.get(f"/projects/{project_id}", headers=auth(member)).status_code == 200

    r = client.delete(f"/projects/{project_id}/members/{member}", headers=auth(admin))
    assert r.status_code == 200

    assert client.get(f"/projects/{project_id}", headers=auth(member)).status_code == 403
    r = client.get("/projects", headers=auth(member))
    assert r.status_code == 200
    assert r.json() == []

def test_catalog(client):
    r = client.get("/permissions")
    assert r.status_code == 200
    body = r.json()
    assert sum(len(v) for v in body.values()) == 27
    high_risk = {i["permission"] for items in body.values() for i in items if i["high_risk"]}
    assert "member.remove" in high_risk

    r = client.get("/roles")
    assert [x["role"] for x in r.json()] == ["ADMIN", "MANAGER", "MEMBER"]
    assert [x["weight"] for x in r.json()] == [3, 2, 1]
