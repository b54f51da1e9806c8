import os
import uuid

# must be set before kosmos.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kosmos.db import get_db
from kosmos.main import create_app
from kosmos.models import Base
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.models.user import User
from kosmos.rbac.roles import ProjectRole

@pytest.fixture()
def db_session() -> Session:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

@pytest.fixture()
def client(db_session: Session) -> TestClient:
    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)

def make_user(db: Session, prefix: str = "user") -> User:
    u = User(email=f"{prefix}+{uuid.uuid4().hex[:10]}@example.com")
    db.add(u)
    db.flush()
    return u

def add_membership(
    db: Session,
    project: Project,
    user: User,
    role: ProjectRole,
    is_active: bool = True,
    custom_permissions: dict | None = None,
) -> ProjectMembership:
    m = ProjectMembership(
        project_id=project.id,
        user_id=user.id,
        role=role,
        is_active=is_active,
        custom_permissions=custom_permissions,
    )
    db.add(m)
    db.flush()
    return m

@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return make_user(db_session, "admin")

@pytest.fixture()
def project(db_session: Session, admin_user: User) -> Project:
    p = Project(name=f"p-{uuid.uuid4().hex[:6]}", owner_id=admin_user.id)
    db_session.add(p)
    db_session.flush()
    add_membership(db_session, p, admin_user, ProjectRole.admin)
    db_session.commit()
    return p

def auth(user_id) -> dict[str, str]:
    return {"x-user-id": str(user_id)}
