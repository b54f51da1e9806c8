from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from kosmos.rbac.roles import ProjectRole

class Permission(str, Enum):
    # project
    project_view = "project.view"
    project_edit = "project.edit"
    project_delete = "project.delete"
    project_archive = "project.archive"

    # members
    member_view = "member.view"
    member_invite = "member.invite"
    member_remove = "member.remove"
    member_change_role = "member.change_role"

    # tasks
    task_view = "task.view"
    task_create = "task.create"
    task_edit_any = "task.edit_any"
    task_edit_own = "task.edit_own"
    task_delete_any = "task.delete_any"
    task_delete_own = "task.delete_own"
    task_assign = "task.assign"
    task_change_status = "task.change_status"
    task_change_priority = "task.change_priority"
    task_comment = "task.comment"

    # chat
    chat_view = "chat.view"
    chat_send = "chat.send"
    chat_delete_own = "chat.delete_own"
    chat_delete_any = "chat.delete_any"
    chat_create_room = "chat.create_room"
    chat_manage_room = "chat.manage_room"

    # files
    file_upload = "file.upload"
    file_delete_any = "file.delete_any"
    file_delete_own = "file.delete_own"

    @property
    def description(self) -> str:
        return PERMISSION_DESCRIPTIONS[self]

    @property
    def is_high_risk(self) -> bool:
        return self in HIGH_RISK_PERMISSIONS

P = Permission

PERMISSION_CATEGORIES: Mapping[str, tuple[Permission, ...]] = MappingProxyType({
    "Project Management": (P.project_view, P.project_edit, P.project_delete, P.project_archive),
    "Member Management": (P.member_view, P.member_invite, P.member_remove, P.member_change_role),
    "Task Management": (
        P.task_view,
        P.task_create,
        P.task_edit_any,
        P.task_edit_own,
        P.task_delete_any,
        P.task_delete_own,
        P.task_assign,
        P.task_change_status,
        P.task_change_priority,
        P.task_comment,
    ),
    "Communication": (
        P.chat_view,
        P.chat_send,
        P.chat_delete_own,
        P.chat_delete_any,
        P.chat_create_room,
        P.chat_manage_room,
    ),
    "File Management": (P.file_upload, P.file_delete_any, P.file_delete_own),
})

PERMISSION_DESCRIPTIONS: Mapping[Permission, str] = MappingProxyType({
    P.project_view: "View project details and settings",
    P.project_edit: "Edit project information",
    P.project_delete: "Delete the project",
    P.project_archive: "Archive or restore the project",
    P.member_view: "View project members",
    P.member_invite: "Invite new members",
    P.member_remove: "Remove members from project",
    P.member_change_role: "Change member roles",
    P.task_view: "View all tasks",
    P.task_create: "Create new tasks",
    P.task_edit_any: "Edit any task",
    P.task_edit_own: "Edit tasks assigned to you",
    P.task_delete_any: "Delete any task",
    P.task_delete_own: "Delete your own tasks",
    P.task_assign: "Assign tasks to members",
    P.task_change_status: "Update task status",
    P.task_change_priority: "Change task priority",
    P.task_comment: "Add comments to tasks",
    P.chat_view: "View chat messages",
    P.chat_send: "Send chat messages",
    P.chat_delete_own: "Delete your own messages",
    P.chat_delete_any: "Delete any message",
    P.chat_create_room: "Create new chat rooms",
    P.chat_manage_room: "Manage chat room settings",
    P.file_upload: "Upload files to project",
    P.file_delete_any: "Delete any file",
    P.file_delete_own: "Delete your own files",
})

HIGH_RISK_PERMISSIONS: frozenset[Permission] = frozenset({
    P.project_delete,
    P.member_remove,
    P.member_change_role,
    P.task_delete_any,
    P.chat_delete_any,
    P.file_delete_any,
})

ADMIN_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

MANAGER_PERMISSIONS: frozenset[Permission] = frozenset({
    # project is read-only
    P.project_view,
    # can invite, cannot remove or change roles
    P.member_view,
    P.member_invite,
    P.task_view,
    P.task_create,
    P.task_edit_any,
    P.task_edit_own,
    P.task_delete_any,
    P.task_delete_own,
    P.task_assign,
    P.task_change_status,
    P.task_change_priority,
    P.task_comment,
    P.chat_view,
    P.chat_send,
    P.chat_delete_own,
    P.chat_delete_any,
    P.chat_create_room,
    P.chat_manage_room,
    P.file_upload,
    P.file_delete_own,
})

MEMBER_PERMISSIONS: frozenset[Permission] = frozenset({
    P.project_view,
    P.member_view,
    P.task_view,
    P.task_create,
    P.task_edit_own,
    P.task_delete_own,
    # status of assigned tasks only
    P.task_change_status,
    P.task_comment,
    P.chat_view,
    P.chat_send,
    P.chat_delete_own,
    P.file_upload,
    P.file_delete_own,
})

ROLE_PERMISSION_DEFAULTS: Mapping[ProjectRole, frozenset[Permission]] = MappingProxyType({
    ProjectRole.admin: ADMIN_PERMISSIONS,
    ProjectRole.manager: MANAGER_PERMISSIONS,
    ProjectRole.member: MEMBER_PERMISSIONS,
})
