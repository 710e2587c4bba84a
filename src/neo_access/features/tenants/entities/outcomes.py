"""Results of tenant lifecycle operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ....config.constants import DeletionMode


@dataclass(frozen=True)
class SoftDeleteOutcome:
    """Tenant marked for deletion after the retention window."""

    tenant_id: str
    tenant_name: str
    scheduled_deletion_date: str
    mode: DeletionMode = DeletionMode.SOFT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "tenantId": self.tenant_id,
            "scheduledDeletionDate": self.scheduled_deletion_date,
        }


@dataclass(frozen=True)
class HardDeleteOutcome:
    """Tenant and its scoped data permanently removed.

    ``deleted_counts`` lists only collections that had documents.
    """

    tenant_id: str
    tenant_name: str
    deleted_counts: Dict[str, int]
    mode: DeletionMode = DeletionMode.HARD

    @property
    def total_documents_deleted(self) -> int:
        return sum(self.deleted_counts.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "tenantId": self.tenant_id,
            "deletedCounts": dict(self.deleted_counts),
            "totalDocumentsDeleted": self.total_documents_deleted,
        }


@dataclass
class SweepReport:
    """What one scheduled sweep found and did."""

    due: List[str] = field(default_factory=list)
    purged: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    auto_execute: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "due": list(self.due),
            "purged": list(self.purged),
            "failed": dict(self.failed),
            "autoExecute": self.auto_execute,
        }
