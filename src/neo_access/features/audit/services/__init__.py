"""Audit services."""

from .audit_logger import AUDIT_ALERT_FILTER, AuditLogger

__all__ = [
    "AUDIT_ALERT_FILTER",
    "AuditLogger",
]
