"""Role level comparisons.

Every privilege decision in the package reduces to comparing role levels
through ``RoleModel``. The model is pure and total: any input resolves to a
level, unknown roles resolving to 0.
"""

import logging
from typing import Mapping, Optional

from ....config.settings import AccessSettings
from ..entities.role import (
    Comparison,
    ROLE_LEVELS,
    RoleLike,
    RoleName,
    UNKNOWN_ROLE_LEVEL,
    parse_role_name,
)

logger = logging.getLogger(__name__)


class RoleModel:
    """Maps roles to levels and compares them against configured thresholds."""

    def __init__(
        self,
        levels: Optional[Mapping[RoleName, int]] = None,
        admin_threshold: int = 80,
        top_level: int = 100,
    ):
        if admin_threshold > top_level:
            raise ValueError("admin_threshold cannot exceed top_level")
        self.levels = dict(levels or ROLE_LEVELS)
        self.admin_threshold = admin_threshold
        self.top_level = top_level

    @classmethod
    def from_settings(cls, settings: AccessSettings) -> "RoleModel":
        """Build a model using the thresholds from settings."""
        return cls(
            admin_threshold=settings.admin_threshold,
            top_level=settings.top_level,
        )

    def level_of(self, role: RoleLike) -> int:
        """Resolve a role name, ``RoleName`` or raw level to its integer level.

        Digit-only strings are treated as raw levels. Unknown names, missing
        roles and raw levels outside ``0..top_level`` resolve to 0.
        """
        if role is None or isinstance(role, bool):
            return UNKNOWN_ROLE_LEVEL
        if isinstance(role, int):
            return self._raw_level(role)
        if isinstance(role, str) and not isinstance(role, RoleName) and role.strip().isdigit():
            return self._raw_level(int(role.strip()))
        name = parse_role_name(role)
        if name is None:
            logger.debug(f"Unknown role {role!r} resolved to level {UNKNOWN_ROLE_LEVEL}")
            return UNKNOWN_ROLE_LEVEL
        return self.levels.get(name, UNKNOWN_ROLE_LEVEL)

    def _raw_level(self, level: int) -> int:
        if level > self.top_level:
            logger.warning(f"Role level {level} above top level {self.top_level} resolved to {UNKNOWN_ROLE_LEVEL}")
            return UNKNOWN_ROLE_LEVEL
        return max(level, UNKNOWN_ROLE_LEVEL)

    def compare(self, a: RoleLike, b: RoleLike) -> Comparison:
        level_a, level_b = self.level_of(a), self.level_of(b)
        if level_a < level_b:
            return Comparison.LT
        if level_a > level_b:
            return Comparison.GT
        return Comparison.EQ

    def is_at_least(self, role: RoleLike, threshold: int) -> bool:
        return self.level_of(role) >= threshold

    def is_admin(self, role: RoleLike) -> bool:
        """Check whether the role may perform administrative actions."""
        return self.is_at_least(role, self.admin_threshold)

    def is_top_tier(self, role: RoleLike) -> bool:
        """Check whether the role sits at the top of the hierarchy."""
        return self.is_at_least(role, self.top_level)
