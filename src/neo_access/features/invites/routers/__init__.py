"""Invite routers."""

from .invite_router import get_invite_service, invite_router

__all__ = [
    "get_invite_service",
    "invite_router",
]
