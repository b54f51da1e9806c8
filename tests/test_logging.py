from structlog.testing import capture_logs

from conftest import make_user
from kosmos.logging import add_logger_name, get_logger
from kosmos.rbac.roles import ProjectRole
from kosmos.services.members import MembershipService

def test_logger_name_survives_print_logger():
    log = get_logger("kosmos.audit")
    with capture_logs() as logs:
        log.info("hello")
    assert logs == [{"event": "hello", "log_level": "info", "logger": "kosmos.audit"}]

def test_add_logger_name_keeps_bound_name():
    assert add_logger_name(None, "info", {"logger": "kosmos.db"})["logger"] == "kosmos.db"
    assert add_logger_name(None, "info", {})["logger"] == "kosmos"

def test_service_logs_carry_module_name(db_session, project, admin_user):
    u = make_user(db_session)
    with capture_logs() as logs:
        MembershipService(db_session).add_member(project.id, admin_user.id, u.id, ProjectRole.member)

    [added] = [e for e in logs if e["event"] == "member added"]
    assert added["logger"] == "kosmos.services.members"
    assert added["user_id"] == str(u.id)
