"""Capability router."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.shared.context import ActorContext
from ...users.routers.dependencies import get_actor_context
from ..services.permission_resolver import PermissionResolver

logger = logging.getLogger(__name__)

capability_router = APIRouter(prefix="/me", tags=["Permissions"])


def get_permission_resolver() -> PermissionResolver:
    """Placeholder for permission resolver dependency.

    Applications must override this via ``app.dependency_overrides``.
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Permission resolver not configured",
    )


@capability_router.get("/capabilities")
async def get_my_capabilities(
    actor: ActorContext = Depends(get_actor_context),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> Dict[str, Any]:
    """Resolved capability set of the calling user."""
    capabilities = await resolver.resolve_for_user_id(actor.actor_id)
    return capabilities.to_dict()
