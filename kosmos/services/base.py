import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from kosmos.logging import get_logger
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.rbac.checker import PermissionChecker, permission_checker
from kosmos.rbac.errors import ConfigurationError, PermissionDenied
from kosmos.rbac.member import ProjectMember
from kosmos.rbac.validator import RoleValidator, role_validator
from kosmos.services.errors import ProjectNotFound

logger = get_logger(__name__)

class ProjectScopedService:
    def __init__(
        self,
        db: Session,
        checker: PermissionChecker = permission_checker,
        validator: RoleValidator = role_validator,
    ):
        self.db = db
        self.checker = checker
        self.validator = validator

    def get_project(self, project_id: uuid.UUID) -> Project:
        project = self.db.get(Project, project_id)
        if project is None:
            raise ProjectNotFound()
        return project

    def lock_members(self, project_id: uuid.UUID) -> list[ProjectMembership]:
        # read-check-write must see a stable member list; row locks make
        # concurrent demotions of different admins serialize
        q = (
            select(ProjectMembership)
            .where(ProjectMembership.project_id == project_id)
            .order_by(ProjectMembership.joined_at, ProjectMembership.id)
            .with_for_update()
        )
        return list(self.db.scalars(q).all())

    def load_members(self, project_id: uuid.UUID) -> list[ProjectMembership]:
        q = (
            select(ProjectMembership)
            .where(ProjectMembership.project_id == project_id)
            .order_by(ProjectMembership.joined_at, ProjectMembership.id)
        )
        return list(self.db.scalars(q).all())

    @staticmethod
    def find(rows: list[ProjectMembership], user_id: uuid.UUID) -> ProjectMembership | None:
        for row in rows:
            if row.user_id == user_id:
                return row
        return None

    def snapshot(self, row: ProjectMembership) -> ProjectMember:
        try:
            return ProjectMember.from_row(row)
        except ConfigurationError as e:
            logger.error(
                "membership row failed to parse",
                project_id=str(row.project_id),
                user_id=str(row.user_id),
                error=str(e),
            )
            raise

    def actor(self, rows: list[ProjectMembership], user_id: uuid.UUID) -> ProjectMembership:
        row = self.find(rows, user_id)
        if row is None or not row.is_active:
            raise PermissionDenied("You are not a member of this project")
        return row

    def require(self, row: ProjectMembership, permission) -> None:
        try:
            self.checker.require_permission(self.snapshot(row), permission)
        except PermissionDenied:
            logger.info(
                "permission denied",
                project_id=str(row.project_id),
                user_id=str(row.user_id),
                permission=str(getattr(permission, "value", permission)),
            )
            raise

    def allows(self, row: ProjectMembership, permission) -> bool:
        return self.checker.has_permission(self.snapshot(row), permission)
