from enum import Enum

class ProjectRole(str, Enum):
    admin = "ADMIN"
    manager = "MANAGER"
    member = "MEMBER"

    @property
    def weight(self) -> int:
        return ROLE_WEIGHTS[self]

    @property
    def display_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self]

    def outranks(self, other: "ProjectRole") -> bool:
        return self.weight > other.weight

    def at_least(self, other: "ProjectRole") -> bool:
        return self.weight >= other.weight

ROLE_WEIGHTS: dict[ProjectRole, int] = {
    ProjectRole.admin: 3,
    ProjectRole.manager: 2,
    ProjectRole.member: 1,
}

ROLE_DISPLAY_NAMES: dict[ProjectRole, str] = {
    ProjectRole.admin: "Administrator",
    ProjectRole.manager: "Manager",
    ProjectRole.member: "Member",
}

# ui badge colours
ROLE_COLORS: dict[ProjectRole, str] = {
    ProjectRole.admin: "#EF4444",
    ProjectRole.manager: "#F59E0B",
    ProjectRole.member: "#10B981",
}
