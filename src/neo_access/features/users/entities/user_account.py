"""User account entity."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ....store.protocols import Document


@dataclass
class UserAccount:
    """Stored user profile as seen by the access-control core.

    Authentication lives elsewhere; this only carries the claims needed for
    authorization decisions.
    """

    id: str
    role: Optional[str] = None
    tenant_id: Optional[str] = None
    permission_group_id: Optional[str] = None
    custom_permissions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    assigned_resource_ids: List[str] = field(default_factory=list)
    email: Optional[str] = None
    display_name: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_document(cls, document: Document) -> "UserAccount":
        """Build from a stored profile.

        ``assignedProjectIds`` is read when ``assignedResourceIds`` is absent.
        """
        data = document.data
        assigned = data.get("assignedResourceIds")
        if assigned is None:
            assigned = data.get("assignedProjectIds") or []
        tenant_id = data.get("tenantId")
        return cls(
            id=document.id,
            role=data.get("role"),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
            permission_group_id=data.get("permissionGroupId") or None,
            custom_permissions=dict(data.get("customPermissions") or {}),
            assigned_resource_ids=[str(r) for r in assigned],
            email=data.get("email"),
            display_name=data.get("displayName"),
            is_active=bool(data.get("isActive", True)),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "tenantId": self.tenant_id,
            "permissionGroupId": self.permission_group_id,
            "customPermissions": self.custom_permissions,
            "assignedResourceIds": list(self.assigned_resource_ids),
            "email": self.email,
            "displayName": self.display_name,
            "isActive": self.is_active,
        }
