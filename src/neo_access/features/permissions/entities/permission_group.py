"""Permission group entity and the built-in capability tables.

A permission group is a named bundle of boolean capability flags split into
five categories. Flags are stored under their camelCase names so documents
written by older clients stay readable.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ....store.protocols import Document
from ...roles.entities.role import RoleName


class PermissionCategory(str, Enum):
    """Capability categories, valued by their stored key."""

    PROJECT_ACCESS = "projectAccess"
    TASK_ACCESS = "taskAccess"
    VIEW_ACCESS = "viewAccess"
    EXPORT_ACCESS = "exportAccess"
    SPECIAL_PERMISSIONS = "specialPermissions"


CATEGORY_FLAGS: Mapping[PermissionCategory, Tuple[str, ...]] = {
    PermissionCategory.PROJECT_ACCESS: ("viewAll", "assignedOnly", "create", "edit", "archive"),
    PermissionCategory.TASK_ACCESS: ("viewAll", "assignedProjectsOnly", "create", "edit", "delete"),
    PermissionCategory.VIEW_ACCESS: (
        "dashboard",
        "taskManager",
        "taskDashboard",
        "projectManagement",
        "userManagement",
        "weeklyEditor",
        "dailyFollowUp",
    ),
    PermissionCategory.EXPORT_ACCESS: ("tasks", "projects", "reports"),
    PermissionCategory.SPECIAL_PERMISSIONS: (
        "viewAllUserProfiles",
        "managePermissions",
        "accessTrash",
        "useCommandMenu",
    ),
}

PermissionFlags = Dict[str, Dict[str, bool]]


def empty_flags() -> PermissionFlags:
    """Every flag of every category set to False."""
    return {category.value: {name: False for name in names} for category, names in CATEGORY_FLAGS.items()}


def normalize_flags(raw: Optional[Mapping[str, Any]]) -> PermissionFlags:
    """Read stored flags onto the full category layout.

    Missing categories and flags are False; unknown keys are dropped.
    """
    flags = empty_flags()
    for category, names in flags.items():
        stored = (raw or {}).get(category)
        if not isinstance(stored, Mapping):
            continue
        for name in names:
            if name in stored:
                names[name] = bool(stored[name])
    return flags


def _flags(project, task, view, export, special) -> PermissionFlags:
    layout = (project, task, view, export, special)
    return {
        category.value: dict(zip(CATEGORY_FLAGS[category], values))
        for category, values in zip(CATEGORY_FLAGS, layout)
    }


# Restrictive fallback for users with no group and no legacy mapping.
DEFAULT_PERMISSIONS: PermissionFlags = _flags(
    project=(False, True, False, False, False),
    task=(False, True, False, False, False),
    view=(False, False, False, False, False, False, False),
    export=(False, False, False),
    special=(False, False, False, False),
)

_ADMIN = _flags(
    project=(True, False, True, True, True),
    task=(True, False, True, True, True),
    view=(True, True, True, True, True, True, True),
    export=(True, True, True),
    special=(True, True, True, True),
)

_PROJECT_MANAGER = _flags(
    project=(True, False, True, True, False),
    task=(True, False, True, True, True),
    view=(True, True, True, True, False, True, True),
    export=(True, True, True),
    special=(False, False, False, True),
)

_MEMBER = _flags(
    project=(False, True, False, False, False),
    task=(False, True, True, True, False),
    view=(True, True, True, False, False, True, True),
    export=(True, False, False),
    special=(False, False, False, True),
)

_EXTERNAL = _flags(
    project=(False, True, False, False, False),
    task=(False, True, False, False, False),
    view=(True, False, True, False, False, False, False),
    export=(False, False, False),
    special=(False, False, False, False),
)

# Used when a user has no permission group assigned.
LEGACY_ROLE_MAP: Mapping[RoleName, PermissionFlags] = {
    RoleName.APP_ADMIN: _ADMIN,
    RoleName.PROJECT_MANAGER: _PROJECT_MANAGER,
    RoleName.BASE_USER: _MEMBER,
    RoleName.CONSULTANT: _MEMBER,
}


@dataclass(frozen=True)
class GroupTemplate:
    """Built-in group installed for every new tenant."""

    name: str
    description: str
    color: str
    permissions: PermissionFlags
    roles: Tuple[RoleName, ...] = ()


DEFAULT_GROUPS: Tuple[GroupTemplate, ...] = (
    GroupTemplate(
        "Administrators",
        "Full system access. Can manage users, projects, tasks, and permissions.",
        "#ef4444",
        _ADMIN,
        (RoleName.SUPERADMIN, RoleName.APP_ADMIN),
    ),
    GroupTemplate(
        "Project Managers",
        "Project managers. Can create and manage projects and tasks, but not manage users or permissions.",
        "#3b82f6",
        _PROJECT_MANAGER,
        (RoleName.PROJECT_MANAGER,),
    ),
    GroupTemplate(
        "Team Member",
        "Team members. Can only see and work on assigned projects. Cannot delete tasks or manage projects.",
        "#10b981",
        _MEMBER,
        (RoleName.BASE_USER,),
    ),
    GroupTemplate(
        "Consultant",
        "External consultants. Can see and work on assigned projects with limited editing permissions.",
        "#f59e0b",
        _MEMBER,
        (RoleName.CONSULTANT,),
    ),
    GroupTemplate(
        "External User",
        "External users with very limited access. Only can view information for specific assigned projects.",
        "#6b7280",
        _EXTERNAL,
        (RoleName.EXTERNAL_USER,),
    ),
)


@dataclass
class PermissionGroup:
    """Named, reusable bundle of capability flags scoped to one tenant."""

    id: str
    name: str
    tenant_id: Optional[str]
    permissions: PermissionFlags = field(default_factory=empty_flags)
    description: str = ""
    color: str = "#000000"
    created_by: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_document(cls, document: Document) -> "PermissionGroup":
        data = document.data
        tenant_id = data.get("tenantId")
        return cls(
            id=document.id,
            name=data.get("name", ""),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
            permissions=normalize_flags(data),
            description=data.get("description", ""),
            color=data.get("color", "#000000"),
            created_by=data.get("createdBy"),
            created_at=data.get("createdAt"),
        )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "name": self.name,
            "tenantId": self.tenant_id,
            "description": self.description,
            "color": self.color,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
        }
        document.update(copy.deepcopy(self.permissions))
        return document
