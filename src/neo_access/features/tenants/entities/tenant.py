"""Tenant domain entity."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ....config.constants import TenantStatus
from ....store.protocols import Document


@dataclass
class Tenant:
    """Tenant record as seen by the lifecycle manager.

    Only ``TenantLifecycleManager`` mutates the stored record.
    """

    id: str
    name: str
    status: TenantStatus = TenantStatus.ACTIVE
    scheduled_deletion_date: Optional[str] = None
    deletion_requested_by: Optional[str] = None
    deletion_requested_at: Optional[str] = None
    is_active: bool = True

    @property
    def is_pending_deletion(self) -> bool:
        return self.status == TenantStatus.PENDING_DELETION

    @classmethod
    def from_document(cls, document: Document) -> "Tenant":
        data = document.data
        try:
            status = TenantStatus(data.get("status") or TenantStatus.ACTIVE.value)
        except ValueError:
            status = TenantStatus.ACTIVE
        return cls(
            id=document.id,
            name=data.get("name", ""),
            status=status,
            scheduled_deletion_date=data.get("scheduledDeletionDate"),
            deletion_requested_by=data.get("deletionRequestedBy"),
            deletion_requested_at=data.get("deletionRequestedAt"),
            is_active=bool(data.get("isActive", status == TenantStatus.ACTIVE)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "scheduledDeletionDate": self.scheduled_deletion_date,
            "deletionRequestedBy": self.deletion_requested_by,
            "deletionRequestedAt": self.deletion_requested_at,
            "isActive": self.is_active,
        }
