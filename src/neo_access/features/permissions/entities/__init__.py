"""Permission entities."""

from .permission_group import (
    CATEGORY_FLAGS,
    DEFAULT_GROUPS,
    DEFAULT_PERMISSIONS,
    GroupTemplate,
    LEGACY_ROLE_MAP,
    PermissionCategory,
    PermissionFlags,
    PermissionGroup,
    empty_flags,
    normalize_flags,
)
from .capability_set import ACTION_TABLE, CapabilitySet, CapabilitySource

__all__ = [
    # Groups
    "CATEGORY_FLAGS",
    "DEFAULT_GROUPS",
    "DEFAULT_PERMISSIONS",
    "GroupTemplate",
    "LEGACY_ROLE_MAP",
    "PermissionCategory",
    "PermissionFlags",
    "PermissionGroup",
    "empty_flags",
    "normalize_flags",

    # Capabilities
    "ACTION_TABLE",
    "CapabilitySet",
    "CapabilitySource",
]
