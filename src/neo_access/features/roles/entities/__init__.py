"""Role entities."""

from .role import (
    Comparison,
    ROLE_LEVELS,
    RoleLike,
    RoleName,
    UNKNOWN_ROLE_LEVEL,
    parse_role_name,
)

__all__ = [
    "Comparison",
    "ROLE_LEVELS",
    "RoleLike",
    "RoleName",
    "UNKNOWN_ROLE_LEVEL",
    "parse_role_name",
]
