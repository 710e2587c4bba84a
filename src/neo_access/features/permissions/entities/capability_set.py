"""Resolved capabilities for one user."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .permission_group import CATEGORY_FLAGS, PermissionCategory, empty_flags


class CapabilitySource:
    """Where a capability set came from."""

    GROUP = "group"
    LEGACY = "legacy"
    DEFAULT = "default"
    NONE = "none"


# (resource, action) -> flags of which any one grants the action
ACTION_TABLE: Mapping[Tuple[str, str], Tuple[Tuple[PermissionCategory, str], ...]] = {
    ("tasks", "view"): (
        (PermissionCategory.TASK_ACCESS, "viewAll"),
        (PermissionCategory.TASK_ACCESS, "assignedProjectsOnly"),
    ),
    ("tasks", "create"): ((PermissionCategory.TASK_ACCESS, "create"),),
    ("tasks", "edit"): ((PermissionCategory.TASK_ACCESS, "edit"),),
    ("tasks", "delete"): ((PermissionCategory.TASK_ACCESS, "delete"),),
    ("projects", "view"): (
        (PermissionCategory.PROJECT_ACCESS, "viewAll"),
        (PermissionCategory.PROJECT_ACCESS, "assignedOnly"),
    ),
    ("projects", "create"): ((PermissionCategory.PROJECT_ACCESS, "create"),),
    ("projects", "edit"): ((PermissionCategory.PROJECT_ACCESS, "edit"),),
    ("projects", "archive"): ((PermissionCategory.PROJECT_ACCESS, "archive"),),
    ("tasks", "export"): ((PermissionCategory.EXPORT_ACCESS, "tasks"),),
    ("projects", "export"): ((PermissionCategory.EXPORT_ACCESS, "projects"),),
    ("reports", "export"): ((PermissionCategory.EXPORT_ACCESS, "reports"),),
    ("users", "view_all"): ((PermissionCategory.SPECIAL_PERMISSIONS, "viewAllUserProfiles"),),
    ("permissions", "manage"): ((PermissionCategory.SPECIAL_PERMISSIONS, "managePermissions"),),
    ("trash", "access"): ((PermissionCategory.SPECIAL_PERMISSIONS, "accessTrash"),),
    ("command_menu", "use"): ((PermissionCategory.SPECIAL_PERMISSIONS, "useCommandMenu"),),
}


@dataclass(frozen=True)
class CapabilitySet:
    """Immutable answer to "what may this user do".

    Top-tier sets allow every action and view regardless of their flags.
    """

    flags: Mapping[str, Mapping[str, bool]] = field(default_factory=empty_flags)
    source: str = CapabilitySource.NONE
    role: Optional[Any] = None
    top_tier: bool = False
    assigned_resource_ids: Tuple[str, ...] = ()
    permission_group_id: Optional[str] = None

    def __post_init__(self):
        frozen = {
            str(getattr(category, "value", category)): MappingProxyType(
                {name: bool(value) for name, value in values.items()}
            )
            for category, values in self.flags.items()
        }
        object.__setattr__(self, "flags", MappingProxyType(frozen))
        object.__setattr__(self, "assigned_resource_ids", tuple(self.assigned_resource_ids))

    @classmethod
    def none(cls) -> "CapabilitySet":
        """Capability set for a user without a profile: nothing is allowed."""
        return cls(flags=empty_flags(), source=CapabilitySource.NONE)

    def flag(self, category: str, name: str) -> bool:
        """Raw flag value, ignoring the top-tier bypass."""
        return bool(self.flags.get(PermissionCategory(category).value, {}).get(name, False))

    def can(self, action: str, resource: str) -> bool:
        """Check whether ``action`` on ``resource`` is allowed.

        Unknown action/resource pairs are denied.
        """
        if self.top_tier:
            return True
        grants = ACTION_TABLE.get((resource, action))
        if not grants:
            return False
        return any(self.flag(category, name) for category, name in grants)

    def can_view(self, view_name: str) -> bool:
        if self.top_tier:
            return True
        return self.flag(PermissionCategory.VIEW_ACCESS, view_name)

    def is_top_tier(self) -> bool:
        return self.top_tier

    @property
    def unrestricted(self) -> bool:
        """True when the user may see every resource in the tenant."""
        return self.top_tier or self.flag(PermissionCategory.PROJECT_ACCESS, "viewAll")

    def get_allowed_resource_ids(self) -> List[str]:
        """Resource ids the user may see.

        An empty list means "all" only when ``unrestricted`` is True; a
        restricted user with no assignments also gets an empty list. Prefer
        ``allows_resource`` for membership checks.
        """
        if self.unrestricted:
            return []
        return list(self.assigned_resource_ids)

    def allows_resource(self, resource_id: str) -> bool:
        return self.unrestricted or resource_id in self.assigned_resource_ids

    def to_dict(self) -> Dict[str, Any]:
        role = getattr(self.role, "value", self.role)
        return {
            "source": self.source,
            "role": role,
            "topTier": self.top_tier,
            "unrestricted": self.unrestricted,
            "allowedResourceIds": self.get_allowed_resource_ids(),
            "permissionGroupId": self.permission_group_id,
            "permissions": {
                category: dict(self.flags.get(category, {}))
                for category in (c.value for c in CATEGORY_FLAGS)
            },
        }
