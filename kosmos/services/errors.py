class KosmosError(Exception):
    pass

class NotFound(KosmosError):
    detail = "not found"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        self.detail = detail or self.detail

class ProjectNotFound(NotFound):
    detail = "project not found"

class MemberNotFound(NotFound):
    detail = "user is not a member of this project"

class UserNotFound(NotFound):
    detail = "user not found"

class TaskNotFound(NotFound):
    detail = "task not found"

class AlreadyMember(KosmosError):
    def __init__(self, detail: str = "user is already a member of this project"):
        super().__init__(detail)
        self.detail = detail
