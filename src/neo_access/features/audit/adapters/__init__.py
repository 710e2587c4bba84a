"""Audit sink adapters."""

from .logging_sink import LoggingAuditSink
from .store_sink import StoreAuditSink

__all__ = [
    "LoggingAuditSink",
    "StoreAuditSink",
]
