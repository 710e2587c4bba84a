"""Role names and the canonical privilege level table.

Roles exist in two shapes in stored data: a role name on user profiles and
invites, and a numeric level in identity claims. This module owns the single
mapping between them. Nothing else in the package redefines it.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union


class RoleName(str, Enum):
    """Role names as stored on user profiles and invites."""

    SUPERADMIN = "superadmin"
    APP_ADMIN = "app_admin"
    PROJECT_MANAGER = "global_pm"
    CONSULTANT = "consultor"
    BASE_USER = "usuario_base"
    EXTERNAL_USER = "usuario_externo"


class Comparison(str, Enum):
    """Result of comparing two roles by level."""

    LT = "lt"
    EQ = "eq"
    GT = "gt"


ROLE_LEVELS: Mapping[RoleName, int] = MappingProxyType({
    RoleName.SUPERADMIN: 100,
    RoleName.APP_ADMIN: 80,
    RoleName.PROJECT_MANAGER: 60,
    RoleName.CONSULTANT: 20,
    RoleName.BASE_USER: 10,
    RoleName.EXTERNAL_USER: 5,
})

UNKNOWN_ROLE_LEVEL = 0

RoleLike = Union[RoleName, str, int, None]


def parse_role_name(role: RoleLike) -> Optional[RoleName]:
    """Return the ``RoleName`` for a stored value, or None when it is not a known name."""
    if isinstance(role, RoleName):
        return role
    if isinstance(role, str):
        try:
            return RoleName(role.strip().lower())
        except ValueError:
            return None
    return None
