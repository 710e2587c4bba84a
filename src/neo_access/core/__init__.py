"""Core module for neo-access.

Exports the exception hierarchy and the request-scoped actor context.
"""

from .exceptions import *
from .exceptions import __all__ as _exception_names
from .shared import ActorContext, RoleClaim

__all__ = list(_exception_names) + [
    "ActorContext",
    "RoleClaim",
]
