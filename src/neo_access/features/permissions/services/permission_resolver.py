"""Permission resolution.

Resolution order for a user:

1. The assigned permission group, with the user's ``customPermissions``
   merged on top one flag at a time.
2. Without a group, the legacy table keyed by role name layered over the
   restrictive defaults.
3. Without a profile, a capability set that allows nothing.

Resolution never raises. A store failure while loading a group is logged and
resolution continues with the legacy table.
"""

import copy
import logging
from typing import Any, Mapping, Optional

from ....config.constants import Collections
from ....core.exceptions import StoreError
from ....store.protocols import DocumentStore
from ...roles.entities.role import parse_role_name
from ...roles.services.role_model import RoleModel
from ...users.entities.user_account import UserAccount
from ...users.services.user_directory import UserDirectory
from ..entities.capability_set import CapabilitySet, CapabilitySource
from ..entities.permission_group import (
    CATEGORY_FLAGS,
    DEFAULT_PERMISSIONS,
    LEGACY_ROLE_MAP,
    PermissionFlags,
    PermissionGroup,
)

logger = logging.getLogger(__name__)

_KNOWN_FLAGS = {category.value: set(names) for category, names in CATEGORY_FLAGS.items()}


def merge_overrides(base: PermissionFlags, overrides: Optional[Mapping[str, Any]]) -> PermissionFlags:
    """Apply per-user overrides key by key.

    Only the flags named in ``overrides`` change. Sibling flags in the same
    category and every other category keep their base values. Unknown
    categories and flags are ignored.
    """
    merged = copy.deepcopy(base)
    for category, values in (overrides or {}).items():
        if category not in _KNOWN_FLAGS or not isinstance(values, Mapping):
            logger.debug(f"Ignoring override for unknown category {category!r}")
            continue
        for name, value in values.items():
            if name in _KNOWN_FLAGS[category]:
                merged[category][name] = bool(value)
    return merged


class PermissionResolver:
    """Turns a user profile into a ``CapabilitySet``."""

    def __init__(self, store: DocumentStore, role_model: RoleModel, users: Optional[UserDirectory] = None):
        self._store = store
        self._role_model = role_model
        self._users = users or UserDirectory(store, role_model)

    async def resolve_for(self, user: Optional[UserAccount]) -> CapabilitySet:
        """Resolve the capabilities of ``user``."""
        if user is None:
            return CapabilitySet.none()

        top_tier = self._role_model.is_top_tier(user.role)
        group = await self._load_group(user)
        if group is not None:
            return CapabilitySet(
                flags=merge_overrides(group.permissions, user.custom_permissions),
                source=CapabilitySource.GROUP,
                role=user.role,
                top_tier=top_tier,
                assigned_resource_ids=tuple(user.assigned_resource_ids),
                permission_group_id=group.id,
            )

        role_name = parse_role_name(user.role)
        flags = copy.deepcopy(DEFAULT_PERMISSIONS)
        source = CapabilitySource.DEFAULT
        if role_name in LEGACY_ROLE_MAP:
            flags.update(copy.deepcopy(LEGACY_ROLE_MAP[role_name]))
            source = CapabilitySource.LEGACY
        return CapabilitySet(
            flags=flags,
            source=source,
            role=user.role,
            top_tier=top_tier,
            assigned_resource_ids=tuple(user.assigned_resource_ids),
        )

    async def resolve_for_user_id(self, user_id: str) -> CapabilitySet:
        """Load the profile for ``user_id`` and resolve it."""
        try:
            profile = await self._users.get_profile(user_id)
        except StoreError as e:
            logger.error(f"Failed to load profile for {user_id}: {e}")
            return CapabilitySet.none()
        return await self.resolve_for(profile)

    async def _load_group(self, user: UserAccount) -> Optional[PermissionGroup]:
        if not user.permission_group_id:
            return None
        try:
            document = await self._store.get(Collections.PERMISSION_GROUPS, user.permission_group_id)
        except StoreError as e:
            logger.error(f"Error loading permission group {user.permission_group_id}: {e}")
            return None
        if document is None:
            logger.warning(f"Permission group {user.permission_group_id} not found, falling back to role")
            return None
        group = PermissionGroup.from_document(document)
        if group.tenant_id and user.tenant_id and group.tenant_id != user.tenant_id:
            logger.warning(
                f"Permission group {group.id} belongs to tenant {group.tenant_id}, "
                f"not {user.tenant_id}; falling back to role"
            )
            return None
        return group
