"""User router dependencies."""

from .dependencies import get_actor_context

__all__ = ["get_actor_context"]
