"""Permission services."""

from .permission_resolver import PermissionResolver, merge_overrides
from .group_seeder import PermissionGroupSeeder

__all__ = [
    "PermissionGroupSeeder",
    "PermissionResolver",
    "merge_overrides",
]
