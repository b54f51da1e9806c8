from enum import Enum

from kosmos.rbac.roles import ProjectRole

class ProjectStatus(str, Enum):
    active = "ACTIVE"
    archived = "ARCHIVED"

class TaskStatus(str, Enum):
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    done = "DONE"

class TaskPriority(str, Enum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"

def enum_values(enum_cls: type[Enum]) -> list[str]:
    return [m.value for m in enum_cls]

__all__ = ["ProjectRole", "ProjectStatus", "TaskPriority", "TaskStatus", "enum_values"]
