"""Audit log entry entity.

Entries are immutable once built. There is no API to update or remove one;
sinks only ever append.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from ....config.constants import AuditSeverity


def freeze(value: Any) -> Any:
    """Read-only copy of ``value``: mappings become proxies, sequences tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Plain, JSON-friendly copy of a frozen value."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (tuple, frozenset)):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class AuditLogEntry:
    """Severity tagged record of a security-relevant action."""

    severity: AuditSeverity
    action: str
    actor_id: str
    tenant_id: Optional[str]
    timestamp: str
    details: Mapping[str, Any] = field(default_factory=dict)
    reportable: bool = True
    message: str = ""
    entry_id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self):
        """Freeze details and fill the default message."""
        object.__setattr__(self, "severity", AuditSeverity(self.severity))
        object.__setattr__(self, "details", freeze(self.details))
        if not self.message:
            object.__setattr__(self, "message", f"[ADMIN_AUDIT] Action: {self.action}")

    @property
    def is_alert(self) -> bool:
        """Check if the entry matches the external alerting rule."""
        return self.reportable and self.severity == AuditSeverity.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored/logged document shape."""
        return {
            "entryId": self.entry_id,
            "severity": self.severity.value,
            "message": self.message,
            "action": self.action,
            "actorId": self.actor_id,
            "tenantId": self.tenant_id,
            "details": thaw(self.details),
            "timestamp": self.timestamp,
            "reportable": self.reportable,
        }
