import uuid

from sqlalchemy import select

from kosmos.logging import get_logger
from kosmos.models.enums import TaskPriority, TaskStatus
from kosmos.models.project_member import ProjectMembership
from kosmos.models.task import Task
from kosmos.rbac.errors import PermissionDenied, RoleHierarchyViolation
from kosmos.rbac.perms import Permission
from kosmos.services.base import ProjectScopedService
from kosmos.services.errors import MemberNotFound, TaskNotFound

logger = get_logger(__name__)

UNSET = object()

class TaskService(ProjectScopedService):
    def _task(self, project_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        t = self.db.scalar(select(Task).where(Task.id == task_id, Task.project_id == project_id))
        if t is None:
            raise TaskNotFound()
        return t

    def _check_assignee(
        self, rows: list[ProjectMembership], actor: ProjectMembership, assignee_id: uuid.UUID
    ) -> None:
        assignee = self.find(rows, assignee_id)
        if assignee is None or not assignee.is_active:
            raise MemberNotFound("assignee is not a member of this project")

        self.require(actor, Permission.task_assign)
        if not self.validator.can_assign_task(actor.role, assignee.role):
            raise RoleHierarchyViolation(
                f"Cannot assign task to {assignee.role.display_name}. "
                f"{actor.role.display_name}s can only assign to members with equal or lower roles."
            )

    def list_tasks(self, project_id: uuid.UUID, actor_id: uuid.UUID) -> list[Task]:
        self.get_project(project_id)
        rows = self.load_members(project_id)
        self.require(self.actor(rows, actor_id), Permission.task_view)

        q = select(Task).where(Task.project_id == project_id).order_by(Task.created_at.desc())
        return list(self.db.scalars(q).all())

    def create_task(
        self,
        project_id: uuid.UUID,
        actor_id: uuid.UUID,
        title: str,
        assigned_to: uuid.UUID | None = None,
        priority: TaskPriority = TaskPriority.medium,
    ) -> Task:
        self.get_project(project_id)
        rows = self.load_members(project_id)
        actor = self.actor(rows, actor_id)

        self.require(actor, Permission.task_create)
        if priority != TaskPriority.medium:
            self.require(actor, Permission.task_change_priority)
        # creating a task for yourself needs only task.create
        if assigned_to is not None and assigned_to != actor_id:
            self._check_assignee(rows, actor, assigned_to)

        t = Task(
            project_id=project_id,
            title=title,
            priority=priority,
            created_by=actor_id,
            assigned_to=assigned_to,
        )
        self.db.add(t)
        self.db.flush()

        logger.info("task created", project_id=str(project_id), task_id=str(t.id), created_by=str(actor_id))
        return t

    def update_task(
        self,
        project_id: uuid.UUID,
        actor_id: uuid.UUID,
        task_id: uuid.UUID,
        title: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        assigned_to=UNSET,
    ) -> Task:
        """Apply a partial update.

        Editing the title needs ``task.edit_any``, or ``task.edit_own`` on a
        task the actor created or is assigned to. Status follows the same
        split with ``task.change_status``. Reassigning follows the title rule,
        and handing the task to someone else also needs ``task.assign`` on an
        assignee of equal or lower role. Passing ``assigned_to=None`` unassigns.
        """
        self.get_project(project_id)
        rows = self.load_members(project_id)
        actor = self.actor(rows, actor_id)
        t = self._task(project_id, task_id)

        own = actor_id in (t.created_by, t.assigned_to)
        can_edit_any = self.allows(actor, Permission.task_edit_any)
        reassign = assigned_to is not UNSET and assigned_to != t.assigned_to

        if title is not None:
            if not (can_edit_any or (own and self.allows(actor, Permission.task_edit_own))):
                raise PermissionDenied("You can only edit your own tasks", permission=Permission.task_edit_any)

        if status is not None:
            if not (can_edit_any or (own and self.allows(actor, Permission.task_change_status))):
                raise PermissionDenied(
                    "You can only change the status of your own tasks",
                    permission=Permission.task_change_status,
                )

        if priority is not None:
            self.require(actor, Permission.task_change_priority)
            if not (can_edit_any or own):
                raise PermissionDenied("You can only edit your own tasks", permission=Permission.task_edit_any)

        if reassign:
            if not (can_edit_any or own):
                raise PermissionDenied("You can only edit your own tasks", permission=Permission.task_edit_any)
            if assigned_to is not None and assigned_to != actor_id:
                self._check_assignee(rows, actor, assigned_to)

        # apply only once every check passed
        if title is not None:
            t.title = title
        if status is not None:
            t.status = status
        if priority is not None:
            t.priority = priority
        if reassign:
            t.assigned_to = assigned_to

        self.db.add(t)
        self.db.flush()
        return t

    def delete_task(self, project_id: uuid.UUID, actor_id: uuid.UUID, task_id: uuid.UUID) -> None:
        self.get_project(project_id)
        rows = self.load_members(project_id)
        actor = self.actor(rows, actor_id)
        t = self._task(project_id, task_id)

        if not self.allows(actor, Permission.task_delete_any):
            if t.created_by != actor_id or not self.allows(actor, Permission.task_delete_own):
                raise PermissionDenied("You can only delete your own tasks", permission=Permission.task_delete_any)

        self.db.delete(t)
        self.db.flush()
        logger.info("task deleted", project_id=str(project_id), task_id=str(task_id), deleted_by=str(actor_id))
