"""Typed member snapshots and the parsing boundary for persisted data.

Rows loaded from the store carry the role as a string and per-member
overrides as a loose JSON object. Both are converted here, once, so the
checker and validator only ever see ``ProjectRole`` / ``Permission`` values.
Anything outside the enumerated sets raises ``ConfigurationError``.
"""
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from kosmos.rbac.errors import ConfigurationError
from kosmos.rbac.perms import Permission
from kosmos.rbac.roles import ProjectRole

def parse_role(raw: Any) -> ProjectRole:
    if isinstance(raw, ProjectRole):
        return raw
    if not isinstance(raw, str):
        raise ConfigurationError(f"role must be a string, got {type(raw).__name__}")
    try:
        return ProjectRole(raw)
    except ValueError:
        raise ConfigurationError(f"unknown role: {raw!r}") from None

def parse_permission(raw: Any) -> Permission:
    if isinstance(raw, Permission):
        return raw
    if not isinstance(raw, str):
        raise ConfigurationError(f"permission must be a string, got {type(raw).__name__}")
    try:
        return Permission(raw)
    except ValueError:
        raise ConfigurationError(f"unknown permission: {raw!r}") from None

def parse_overrides(raw: Mapping[str, Any] | None) -> Mapping[Permission, bool]:
    """Parse a stored ``{"task.assign": true, ...}`` object.

    ``None`` and ``{}`` both mean "no overrides". Values must be real
    booleans; ``"true"`` or ``1`` are rejected rather than guessed at.
    """
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"custom permissions must be an object, got {type(raw).__name__}")

    parsed: dict[Permission, bool] = {}
    for key, value in raw.items():
        permission = parse_permission(key)
        if not isinstance(value, bool):
            raise ConfigurationError(f"override for {key!r} must be a boolean, got {value!r}")
        parsed[permission] = value
    return MappingProxyType(parsed)

def dump_overrides(overrides: Mapping[Permission, bool]) -> dict[str, bool] | None:
    if not overrides:
        return None
    return {p.value: bool(v) for p, v in sorted(overrides.items(), key=lambda kv: kv[0].value)}

@dataclass(frozen=True)
class ProjectMember:
    """Immutable view of one membership, as the evaluator sees it."""

    project_id: uuid.UUID
    user_id: uuid.UUID
    role: ProjectRole
    is_active: bool = True
    overrides: Mapping[Permission, bool] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def key(self) -> tuple[uuid.UUID, uuid.UUID]:
        return (self.project_id, self.user_id)

    def with_role(self, role: ProjectRole) -> "ProjectMember":
        return replace(self, role=role)

    @classmethod
    def from_row(cls, row: Any) -> "ProjectMember":
        return cls(
            project_id=row.project_id,
            user_id=row.user_id,
            role=parse_role(row.role),
            is_active=bool(row.is_active),
            overrides=parse_overrides(row.custom_permissions),
        )
