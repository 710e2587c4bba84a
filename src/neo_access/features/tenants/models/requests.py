"""Tenant lifecycle request models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from ....config.constants import DeletionMode


class TenantPurgeRequest(BaseModel):
    """Request model for deleting a tenant."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "confirmName": "Acme Corp",
                "mode": "soft",
                "includeUsers": False,
            }
        },
    )

    confirm_name: str = Field(..., alias="confirmName", description="Exact tenant name")
    mode: DeletionMode = Field(DeletionMode.SOFT, description="soft schedules deletion, hard deletes now")
    include_users: bool = Field(False, alias="includeUsers", description="Also purge user profiles")


class TenantSweepRequest(BaseModel):
    """Request model for triggering a scheduled sweep manually."""

    model_config = ConfigDict(populate_by_name=True)

    auto_execute: bool = Field(False, alias="autoExecute", description="Hard purge due tenants")
