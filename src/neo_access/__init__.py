"""neo-access: multi-tenant RBAC, invitations and tenant lifecycle.

Decides who may act on what, issues and redeems onboarding invitations
under abuse limits, enforces tenant data isolation and performs auditable,
two-phase destruction of a tenant's data.
"""

from .__version__ import __version__
from .config import AccessSettings, get_settings
from .core import ActorContext, NeoAccessError
from .features.audit import AuditLogger
from .features.invites import InviteService
from .features.permissions import CapabilitySet, PermissionResolver
from .features.roles import RoleModel, RoleName
from .features.tenancy import TenantScopeEnforcer
from .features.tenants import TenantLifecycleManager
from .features.users import UserDirectory

__all__ = [
    "__version__",

    # Configuration
    "AccessSettings",
    "get_settings",

    # Core
    "ActorContext",
    "NeoAccessError",

    # Services
    "AuditLogger",
    "CapabilitySet",
    "InviteService",
    "PermissionResolver",
    "RoleModel",
    "RoleName",
    "TenantLifecycleManager",
    "TenantScopeEnforcer",
    "UserDirectory",
]
