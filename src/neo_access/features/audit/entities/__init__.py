"""Audit entities."""

from .audit_entry import AuditLogEntry
from .protocols import AuditSink

__all__ = [
    "AuditLogEntry",
    "AuditSink",
]
