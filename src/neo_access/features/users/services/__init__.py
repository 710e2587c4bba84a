"""User services."""

from .user_directory import UserDirectory

__all__ = ["UserDirectory"]
