"""Tenancy services."""

from .scope_enforcer import TenantScopeEnforcer

__all__ = ["TenantScopeEnforcer"]
