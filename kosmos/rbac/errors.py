class RBACError(Exception):
    """Base class for access-control failures."""

class ConfigurationError(RBACError):
    """An unknown role or permission identifier reached the evaluator.

    This is a defect in the caller or in persisted data, never a
    user-recoverable condition.
    """

class PermissionDenied(RBACError):
    def __init__(self, reason: str, permission=None):
        super().__init__(reason)
        self.reason = reason
        self.permission = permission

class RoleHierarchyViolation(RBACError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

class InvariantViolation(RBACError):
    """A mutation would leave a project in an invalid state."""

    message = "invariant violated"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.reason = message or self.message

class LastAdminViolation(InvariantViolation):
    message = "Cannot remove the last admin. Projects must have at least one admin."
