"""Invite router.

Endpoints for issuing, checking, redeeming, listing and revoking invite
codes. Service failures propagate as ``NeoAccessError`` and are rendered by
the application's exception handlers.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ....core.shared.context import ActorContext
from ...users.routers.dependencies import get_actor_context
from ..models.requests import InviteCreateRequest
from ..models.responses import (
    InviteCheckResponse,
    InviteConsumedResponse,
    InviteCreatedResponse,
    InviteResponse,
)
from ..services.invite_service import InviteService

logger = logging.getLogger(__name__)

invite_router = APIRouter(
    prefix="/invites",
    tags=["Invites"],
    responses={
        403: {"description": "Not allowed"},
        404: {"description": "Invite not found"},
        409: {"description": "Invite already used"},
    },
)


def get_invite_service() -> InviteService:
    """Placeholder for invite service dependency.

    Applications must override this via ``app.dependency_overrides``.
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Invite service not configured",
    )


@invite_router.post("", response_model=InviteCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_invite(
    request: InviteCreateRequest,
    actor: ActorContext = Depends(get_actor_context),
    service: InviteService = Depends(get_invite_service),
) -> InviteCreatedResponse:
    """Issue a new invite code."""
    invite = await service.create_invite(
        actor,
        request.tenant_id,
        request.role,
        request.assigned_resource_ids,
    )
    return InviteCreatedResponse(code=invite.code)


@invite_router.get("", response_model=List[InviteResponse])
async def list_invites(
    actor: ActorContext = Depends(get_actor_context),
    service: InviteService = Depends(get_invite_service),
) -> List[InviteResponse]:
    """List invites visible to the calling administrator."""
    invites = await service.list_invites(actor)
    return [InviteResponse.from_invite(invite) for invite in invites]


@invite_router.get("/{code}", response_model=InviteCheckResponse, response_model_exclude_none=True)
async def check_invite(
    code: str = Path(..., min_length=1, max_length=64),
    service: InviteService = Depends(get_invite_service),
) -> InviteCheckResponse:
    """Check whether an invite code can be redeemed."""
    check = await service.check_invite(code)
    return InviteCheckResponse(valid=check.valid, reason=check.reason, tenant_id=check.tenant_id)


@invite_router.post("/{code}/consume", response_model=InviteConsumedResponse)
async def consume_invite(
    code: str = Path(..., min_length=1, max_length=64),
    actor: ActorContext = Depends(get_actor_context),
    service: InviteService = Depends(get_invite_service),
) -> InviteConsumedResponse:
    """Redeem an invite code for the calling user."""
    invite = await service.consume_invite(code, actor.actor_id)
    return InviteConsumedResponse(
        ok=True,
        tenant_id=invite.tenant_id,
        role=invite.role,
        assigned_resource_ids=invite.assigned_resource_ids,
    )


@invite_router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invite(
    code: str = Path(..., min_length=1, max_length=64),
    actor: ActorContext = Depends(get_actor_context),
    service: InviteService = Depends(get_invite_service),
) -> Response:
    """Revoke an unused invite code."""
    await service.revoke_invite(actor, code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
