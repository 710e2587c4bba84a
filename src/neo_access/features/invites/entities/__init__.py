"""Invite entities."""

from .invite import InviteCheck, InviteCode

__all__ = [
    "InviteCheck",
    "InviteCode",
]
