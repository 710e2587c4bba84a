"""Tenant API models."""

from .requests import TenantPurgeRequest, TenantSweepRequest

__all__ = [
    "TenantPurgeRequest",
    "TenantSweepRequest",
]
