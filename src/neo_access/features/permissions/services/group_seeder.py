"""Default permission group installation."""

import logging
from typing import Dict, Optional
from uuid import uuid4

from ....config.constants import Collections, Fields
from ....store.protocols import DocumentStore, Query, WriteOp
from ....utils.datetime import Clock, to_iso, utc_now
from ...roles.entities.role import parse_role_name
from ..entities.permission_group import DEFAULT_GROUPS, PermissionGroup

logger = logging.getLogger(__name__)


class PermissionGroupSeeder:
    """Installs the built-in groups for a tenant and links users to them."""

    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or utc_now

    async def seed(self, tenant_id: str, created_by: str = "system") -> Dict[str, str]:
        """Create any missing default group.

        Groups are matched by name within the tenant, so re-running is safe.

        Returns:
            Mapping of group name to group id, for created and existing groups
        """
        groups: Dict[str, str] = {}
        for template in DEFAULT_GROUPS:
            existing = await self._store.query(
                Query(Collections.PERMISSION_GROUPS)
                .where(Fields.TENANT_ID, tenant_id)
                .where("name", template.name)
                .with_limit(1)
            )
            if existing:
                groups[template.name] = existing[0].id
                logger.debug(f"Group {template.name!r} already exists for tenant {tenant_id}")
                continue
            group = PermissionGroup(
                id=uuid4().hex,
                name=template.name,
                tenant_id=tenant_id,
                permissions=template.permissions,
                description=template.description,
                color=template.color,
                created_by=created_by,
                created_at=to_iso(self._clock()),
            )
            await self._store.create(Collections.PERMISSION_GROUPS, group.id, group.to_document())
            groups[template.name] = group.id
            logger.info(f"Created group {template.name!r} ({group.id}) for tenant {tenant_id}")
        return groups

    async def link_users(self, tenant_id: str, groups: Dict[str, str]) -> int:
        """Assign each tenant user the default group matching their role.

        Users whose role has no matching group are skipped. Returns the
        number of profiles updated.
        """
        group_by_role = {
            role: groups[template.name]
            for template in DEFAULT_GROUPS
            if template.name in groups
            for role in template.roles
        }
        users = await self._store.query(Query(Collections.USERS).where(Fields.TENANT_ID, tenant_id))
        ops = []
        for user in users:
            role = parse_role_name(user.get("role"))
            group_id = group_by_role.get(role)
            if group_id is None:
                logger.warning(f"Unknown role {user.get('role')!r} for user {user.id}, skipped")
                continue
            if user.get("permissionGroupId") != group_id:
                ops.append(WriteOp.update(Collections.USERS, user.id, {"permissionGroupId": group_id}))

        linked = 0
        for start in range(0, len(ops), self._store.max_batch_size):
            linked += await self._store.batch(ops[start:start + self._store.max_batch_size])
        logger.info(f"Linked {linked} users to default groups in tenant {tenant_id}")
        return linked
