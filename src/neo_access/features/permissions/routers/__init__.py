"""Permission routers."""

from .capability_router import capability_router, get_permission_resolver

__all__ = [
    "capability_router",
    "get_permission_resolver",
]
