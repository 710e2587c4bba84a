"""Audit protocols."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from .audit_entry import AuditLogEntry


@runtime_checkable
class AuditSink(Protocol):
    """Append-only destination for audit entries."""

    @abstractmethod
    async def emit(self, entry: AuditLogEntry) -> None:
        """Deliver one entry. Raise on failure so the logger can retry."""
        ...
