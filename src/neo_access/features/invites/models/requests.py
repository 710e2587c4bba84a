"""Invite request models for API endpoints."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InviteCreateRequest(BaseModel):
    """Request model for issuing an invite."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "tenantId": "T1",
                "role": "usuario_base",
                "assignedResourceIds": ["project-1"],
            }
        },
    )

    tenant_id: str = Field(..., alias="tenantId", min_length=1, description="Tenant the invite joins")
    role: str = Field(..., min_length=1, description="Role granted on redemption")
    assigned_resource_ids: List[str] = Field(
        default_factory=list, alias="assignedResourceIds", description="Resources assigned on redemption"
    )

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v):
        return v.strip()

