"""Actor context.

This module defines the request-scoped identity passed explicitly to every
access-control call. There is no ambient "acting as" state: switching tenant
produces a new context.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Union
from uuid import uuid4


RoleClaim = Union[str, int]


@dataclass(frozen=True)
class ActorContext:
    """Identity claims for the caller of one request.

    ``role`` may be a role name, a ``RoleName`` member or a raw level. When
    it is missing, services hydrate it from the stored user profile.
    """

    actor_id: str
    tenant_id: Optional[str] = None
    role: Optional[RoleClaim] = None
    acting_as_tenant_id: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self):
        if not self.actor_id:
            raise ValueError("actor_id is required")

    @property
    def active_tenant_id(self) -> Optional[str]:
        """Tenant the request operates on."""
        return self.acting_as_tenant_id or self.tenant_id

    @property
    def has_role_claim(self) -> bool:
        return self.role is not None and self.role != ""

    def acting_as(self, tenant_id: Optional[str]) -> "ActorContext":
        """Return a copy scoped to ``tenant_id`` for this request only."""
        return replace(self, acting_as_tenant_id=tenant_id)

    def with_claims(
        self,
        role: Optional[RoleClaim] = None,
        tenant_id: Optional[str] = None,
    ) -> "ActorContext":
        """Return a copy with missing claims filled in."""
        return replace(
            self,
            role=self.role if self.has_role_claim else role,
            tenant_id=self.tenant_id or tenant_id,
        )
