"""Invite code entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....store.protocols import Document
from ....utils.datetime import parse_iso


@dataclass
class InviteCode:
    """Single-use onboarding token.

    Binds a target tenant, role and resource scope. The document id is the
    code itself. Lifecycle: unused, then consumed (terminal). Revocation is
    also terminal.
    """

    code: str
    created_by: str
    tenant_id: Optional[str]
    role: Any
    assigned_resource_ids: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    is_used: bool = False
    used_at: Optional[str] = None
    used_by: Optional[str] = None
    expires_at: Optional[str] = None
    revoked: bool = False
    revoked_at: Optional[str] = None
    revoked_by: Optional[str] = None

    def __post_init__(self):
        self.role = getattr(self.role, "value", self.role)

    def is_expired(self, now: datetime) -> bool:
        expires = parse_iso(self.expires_at)
        return expires is not None and now >= expires

    @classmethod
    def from_document(cls, document: Document) -> "InviteCode":
        data = document.data
        assigned = data.get("assignedResourceIds")
        if assigned is None:
            assigned = data.get("assignedProjectIds") or []
        tenant_id = data.get("tenantId")
        return cls(
            code=data.get("code", document.id),
            created_by=data.get("createdBy", ""),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
            role=data.get("role"),
            assigned_resource_ids=[str(r) for r in assigned],
            created_at=data.get("createdAt"),
            is_used=bool(data.get("isUsed", False)),
            used_at=data.get("usedAt"),
            used_by=data.get("usedBy"),
            expires_at=data.get("expiresAt"),
            revoked=bool(data.get("revoked", False)),
            revoked_at=data.get("revokedAt"),
            revoked_by=data.get("revokedBy"),
        )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "code": self.code,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
            "isUsed": self.is_used,
            "tenantId": self.tenant_id,
            "role": self.role,
            "assignedResourceIds": list(self.assigned_resource_ids),
        }
        optional = {
            "usedAt": self.used_at,
            "usedBy": self.used_by,
            "expiresAt": self.expires_at,
            "revokedAt": self.revoked_at,
            "revokedBy": self.revoked_by,
        }
        document.update({key: value for key, value in optional.items() if value is not None})
        if self.revoked:
            document["revoked"] = True
        return document


@dataclass(frozen=True)
class InviteCheck:
    """Read-only pre-flight result for an invite code."""

    valid: bool
    reason: Optional[str] = None
    tenant_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"valid": self.valid}
        if self.reason is not None:
            result["reason"] = self.reason
        if self.tenant_id is not None:
            result["tenantId"] = self.tenant_id
        return result
