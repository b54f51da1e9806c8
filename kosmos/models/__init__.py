from kosmos.models.base import Base
from kosmos.models.project import Project
from kosmos.models.project_member import ProjectMembership
from kosmos.models.task import Task
from kosmos.models.user import User

__all__ = ["Base", "User", "Project", "ProjectMembership", "Task"]
