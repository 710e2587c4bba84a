"""Tenant services."""

from .lifecycle_manager import SCHEDULER_ACTOR, TenantLifecycleManager

__all__ = [
    "SCHEDULER_ACTOR",
    "TenantLifecycleManager",
]
