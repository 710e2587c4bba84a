"""Roles feature.

Owns the canonical role names, their privilege levels and the comparisons
every other feature uses for authorization decisions.
"""

from .entities import (
    Comparison,
    ROLE_LEVELS,
    RoleLike,
    RoleName,
    UNKNOWN_ROLE_LEVEL,
    parse_role_name,
)
from .services import RoleModel

__all__ = [
    # Entities
    "Comparison",
    "ROLE_LEVELS",
    "RoleLike",
    "RoleName",
    "UNKNOWN_ROLE_LEVEL",
    "parse_role_name",

    # Services
    "RoleModel",
]
