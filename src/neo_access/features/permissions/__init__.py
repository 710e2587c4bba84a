"""Permissions feature.

Capability flags grouped into reusable permission groups, per-user
overrides and the resolver that combines them.
"""

from .entities import (
    ACTION_TABLE,
    CATEGORY_FLAGS,
    CapabilitySet,
    CapabilitySource,
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
from .services import PermissionGroupSeeder, PermissionResolver, merge_overrides

__all__ = [
    # Entities
    "ACTION_TABLE",
    "CATEGORY_FLAGS",
    "CapabilitySet",
    "CapabilitySource",
    "DEFAULT_GROUPS",
    "DEFAULT_PERMISSIONS",
    "GroupTemplate",
    "LEGACY_ROLE_MAP",
    "PermissionCategory",
    "PermissionFlags",
    "PermissionGroup",
    "empty_flags",
    "normalize_flags",

    # Services
    "PermissionGroupSeeder",
    "PermissionResolver",
    "merge_overrides",
]
