"""Tenant routers."""

from .tenant_router import get_lifecycle_manager, tenant_router

__all__ = [
    "get_lifecycle_manager",
    "tenant_router",
]
