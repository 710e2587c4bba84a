"""Tenants feature.

Two-phase, audited tenant destruction: soft delete with a retention window,
hard purge of every tenant-scoped collection, restore and scheduled sweep.
"""

from .entities import HardDeleteOutcome, SoftDeleteOutcome, SweepReport, Tenant
from .services import SCHEDULER_ACTOR, TenantLifecycleManager

__all__ = [
    # Entities
    "HardDeleteOutcome",
    "SoftDeleteOutcome",
    "SweepReport",
    "Tenant",

    # Services
    "SCHEDULER_ACTOR",
    "TenantLifecycleManager",
]
