"""Tenant lifecycle router.

Purge, restore and sweep endpoints. Every endpoint requires a top-tier
actor; the lifecycle manager enforces and audits that.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from ....config.constants import AuditActions
from ....core.shared.context import ActorContext
from ...users.routers.dependencies import get_actor_context
from ..models.requests import TenantPurgeRequest, TenantSweepRequest
from ..services.lifecycle_manager import TenantLifecycleManager

logger = logging.getLogger(__name__)

tenant_router = APIRouter(
    prefix="/tenants",
    tags=["Tenants"],
    responses={
        403: {"description": "Not allowed"},
        404: {"description": "Tenant not found"},
        400: {"description": "Invalid request"},
        500: {"description": "Internal server error"},
    },
)


def get_lifecycle_manager() -> TenantLifecycleManager:
    """Placeholder for lifecycle manager dependency.

    Applications must override this via ``app.dependency_overrides``.
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Tenant lifecycle manager not configured",
    )


@tenant_router.post("/sweep")
async def sweep_pending_deletions(
    request: Optional[TenantSweepRequest] = Body(None),
    actor: ActorContext = Depends(get_actor_context),
    manager: TenantLifecycleManager = Depends(get_lifecycle_manager),
) -> Dict[str, Any]:
    """Run the scheduled deletion sweep on demand."""
    await manager.require_top_tier(actor, AuditActions.UNAUTHORIZED_PURGE_ATTEMPT, None)
    report = await manager.sweep_pending_deletions(auto_execute=request.auto_execute if request else None)
    return report.to_dict()


@tenant_router.post("/{tenant_id}/purge")
async def purge_tenant(
    request: TenantPurgeRequest,
    tenant_id: str = Path(..., min_length=1),
    actor: ActorContext = Depends(get_actor_context),
    manager: TenantLifecycleManager = Depends(get_lifecycle_manager),
) -> Dict[str, Any]:
    """Soft delete or permanently purge a tenant."""
    outcome = await manager.purge_tenant(
        actor,
        tenant_id,
        request.confirm_name,
        request.mode,
        request.include_users,
    )
    return outcome.to_dict()


@tenant_router.post("/{tenant_id}/restore")
async def restore_tenant(
    tenant_id: str = Path(..., min_length=1),
    actor: ActorContext = Depends(get_actor_context),
    manager: TenantLifecycleManager = Depends(get_lifecycle_manager),
) -> Dict[str, Any]:
    """Cancel a pending tenant deletion."""
    tenant = await manager.restore_tenant(actor, tenant_id)
    return tenant.to_dict()
