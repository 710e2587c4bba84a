"""Invite response models for API endpoints."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..entities.invite import InviteCode


class InviteCreatedResponse(BaseModel):
    code: str = Field(..., description="Invite code")


class InviteResponse(BaseModel):
    """Invite as shown to administrators."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    created_by: str = Field(..., alias="createdBy")
    created_at: Optional[str] = Field(None, alias="createdAt")
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    role: Optional[Union[str, int]] = None
    assigned_resource_ids: List[str] = Field(default_factory=list, alias="assignedResourceIds")
    is_used: bool = Field(False, alias="isUsed")
    used_at: Optional[str] = Field(None, alias="usedAt")
    used_by: Optional[str] = Field(None, alias="usedBy")
    expires_at: Optional[str] = Field(None, alias="expiresAt")
    revoked: bool = False

    @classmethod
    def from_invite(cls, invite: InviteCode) -> "InviteResponse":
        return cls(
            code=invite.code,
            created_by=invite.created_by,
            created_at=invite.created_at,
            tenant_id=invite.tenant_id,
            role=invite.role,
            assigned_resource_ids=invite.assigned_resource_ids,
            is_used=invite.is_used,
            used_at=invite.used_at,
            used_by=invite.used_by,
            expires_at=invite.expires_at,
            revoked=invite.revoked,
        )


class InviteCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valid: bool
    reason: Optional[str] = None
    tenant_id: Optional[str] = Field(None, alias="tenantId")


class InviteConsumedResponse(BaseModel):
    """Result of redeeming an invite."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    role: Optional[Union[str, int]] = None
    assigned_resource_ids: List[str] = Field(default_factory=list, alias="assignedResourceIds")
