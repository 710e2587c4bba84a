"""Tenant entities."""

from .tenant import Tenant
from .outcomes import HardDeleteOutcome, SoftDeleteOutcome, SweepReport

__all__ = [
    "HardDeleteOutcome",
    "SoftDeleteOutcome",
    "SweepReport",
    "Tenant",
]
