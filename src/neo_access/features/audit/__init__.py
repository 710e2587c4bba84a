"""Audit feature.

Immutable, severity tagged records of security-relevant actions and the
sinks they are delivered to.
"""

from .entities import AuditLogEntry, AuditSink
from .services import AUDIT_ALERT_FILTER, AuditLogger
from .adapters import LoggingAuditSink, StoreAuditSink

__all__ = [
    # Entities
    "AuditLogEntry",
    "AuditSink",

    # Services
    "AUDIT_ALERT_FILTER",
    "AuditLogger",

    # Adapters
    "LoggingAuditSink",
    "StoreAuditSink",
]
