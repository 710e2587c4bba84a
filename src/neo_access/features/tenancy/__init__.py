"""Tenancy feature.

Tenant data isolation for every scoped read and write.
"""

from .services import TenantScopeEnforcer

__all__ = ["TenantScopeEnforcer"]
