"""Invite API models."""

from .requests import InviteCreateRequest
from .responses import (
    InviteCheckResponse,
    InviteConsumedResponse,
    InviteCreatedResponse,
    InviteResponse,
)

__all__ = [
    # Requests
    "InviteCreateRequest",

    # Responses
    "InviteCheckResponse",
    "InviteConsumedResponse",
    "InviteCreatedResponse",
    "InviteResponse",
]
