"""Users feature.

Read-only view of stored user profiles used to hydrate identity claims.
"""

from .entities import UserAccount
from .services import UserDirectory

__all__ = [
    "UserAccount",
    "UserDirectory",
]
