"""Identity claim dependencies shared by every router.

Authentication happens upstream. The gateway forwards verified claims as
headers and this module turns them into an ``ActorContext``.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from ....config.constants import Headers
from ....core.shared.context import ActorContext

logger = logging.getLogger(__name__)


async def get_actor_context(
    x_user_id: Optional[str] = Header(None, alias=Headers.USER_ID),
    x_tenant_id: Optional[str] = Header(None, alias=Headers.TENANT_ID),
    x_user_role: Optional[str] = Header(None, alias=Headers.USER_ROLE),
    x_acting_as_tenant: Optional[str] = Header(None, alias=Headers.ACTING_AS_TENANT),
    x_request_id: Optional[str] = Header(None, alias=Headers.REQUEST_ID),
) -> ActorContext:
    """Build the request-scoped actor from identity claim headers."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing identity claims",
        )
    extra = {"request_id": x_request_id} if x_request_id else {}
    return ActorContext(
        actor_id=x_user_id,
        tenant_id=x_tenant_id or None,
        role=x_user_role or None,
        acting_as_tenant_id=x_acting_as_tenant or None,
        **extra,
    )
