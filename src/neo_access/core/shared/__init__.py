"""Shared request-scoped types."""

from .context import ActorContext, RoleClaim

__all__ = [
    "ActorContext",
    "RoleClaim",
]
