"""Invite services."""

from .invite_service import InviteService

__all__ = ["InviteService"]
