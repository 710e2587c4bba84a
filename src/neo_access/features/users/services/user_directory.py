"""User profile lookups.

Identity claims from the provider may omit the role or tenant. The directory
fills them in from the stored profile; the ``users`` collection is consulted
first, then the legacy ``user`` collection.
"""

import logging
from typing import Optional

from ....config.constants import Collections
from ....core.shared.context import ActorContext
from ....store.protocols import DocumentStore
from ...roles.entities.role import RoleLike
from ...roles.services.role_model import RoleModel
from ..entities.user_account import UserAccount

logger = logging.getLogger(__name__)


class UserDirectory:
    """Reads user profiles from the document store."""

    def __init__(self, store: DocumentStore, role_model: RoleModel):
        self._store = store
        self._role_model = role_model

    async def get_profile(self, user_id: str) -> Optional[UserAccount]:
        """Get a user profile, or None when no collection holds one."""
        if not user_id:
            return None
        for collection in Collections.USER_LINKED:
            document = await self._store.get(collection, user_id)
            if document is not None:
                return UserAccount.from_document(document)
        logger.debug(f"No profile found for user {user_id}")
        return None

    async def resolve_role(self, actor: ActorContext) -> RoleLike:
        """Trusted role claim when present, else the stored profile role."""
        if actor.has_role_claim:
            return actor.role
        profile = await self.get_profile(actor.actor_id)
        return profile.role if profile else None

    async def resolve_level(self, actor: ActorContext) -> int:
        return self._role_model.level_of(await self.resolve_role(actor))

    async def hydrate(self, actor: ActorContext) -> ActorContext:
        """Return a context with missing role and tenant claims filled in."""
        if actor.has_role_claim and actor.tenant_id:
            return actor
        profile = await self.get_profile(actor.actor_id)
        if profile is None:
            return actor
        return actor.with_claims(role=profile.role, tenant_id=profile.tenant_id)
