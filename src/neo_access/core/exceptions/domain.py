"""Domain exceptions for neo-access.

Typed failures returned to callers of the access-control core. None of them
is raised after a partial mutation except ``PurgeIncompleteError``, which
carries the progress made so the operation can be resumed.
"""

from ...config.constants import ErrorCodes
from .base import NeoAccessError


# Authorization Errors
class AuthorizationError(NeoAccessError):
    """Raised when the actor's role level is insufficient."""
    code = ErrorCodes.AUTHORIZATION_DENIED


class EscalationError(AuthorizationError):
    """Raised when an administrator targets a role at or above their own level."""
    code = ErrorCodes.ESCALATION_BLOCKED


class TenantIsolationError(AuthorizationError):
    """Raised when an access would cross the actor's tenant boundary."""
    code = ErrorCodes.TENANT_ISOLATION


# Abuse limits
class RateLimitError(NeoAccessError):
    """Raised when an issuer has exhausted their invite quota."""
    code = ErrorCodes.RATE_LIMIT_EXCEEDED


# Lookups
class NotFoundError(NeoAccessError):
    """Raised when a required record does not exist."""
    code = ErrorCodes.NOT_FOUND


class TenantNotFoundError(NotFoundError):
    """Raised when tenant is not found."""
    code = ErrorCodes.TENANT_NOT_FOUND


class InviteNotFoundError(NotFoundError):
    """Raised when invite code is not found."""
    code = ErrorCodes.INVITE_NOT_FOUND


# Validation Errors
class ValidationError(NeoAccessError):
    """Raised when caller input fails validation."""
    code = ErrorCodes.VALIDATION_FAILED


class NameConfirmationError(ValidationError):
    """Raised when a purge confirmation does not match the stored tenant name."""
    code = ErrorCodes.NAME_CONFIRMATION_MISMATCH


class InviteExpiredError(ValidationError):
    """Raised when redeeming an invite past its configured lifetime."""
    code = ErrorCodes.INVITE_EXPIRED


class InviteRevokedError(ValidationError):
    """Raised when redeeming an invite an administrator has revoked."""
    code = ErrorCodes.INVITE_REVOKED


class TenantStateError(ValidationError):
    """Raised when a lifecycle transition is invalid for the tenant's status."""
    code = ErrorCodes.INVALID_TENANT_STATE


# Conflicts
class ConflictError(NeoAccessError):
    """Raised when a unique value could not be allocated."""
    code = ErrorCodes.CONFLICT


class ConcurrencyError(NeoAccessError):
    """Raised when a racing caller already consumed a single-use record."""
    code = ErrorCodes.CONCURRENCY


# Tenant purge
class PurgeIncompleteError(NeoAccessError):
    """Raised when a hard purge stops part-way.

    ``details`` holds ``deletedCounts``, ``totalDocumentsDeleted`` and
    ``failedCollection`` so an operator can resume safely.
    """
    code = ErrorCodes.PURGE_INCOMPLETE


class PurgeTimeoutError(PurgeIncompleteError):
    """Raised when a hard purge exceeds its time budget."""
    code = ErrorCodes.PURGE_TIMEOUT


# Configuration Errors
class ConfigurationError(NeoAccessError):
    """Raised when there's a configuration issue."""
    code = ErrorCodes.CONFIG_INVALID
    public_message = "Service is misconfigured"


# Store Errors
class StoreError(NeoAccessError):
    """Base class for document store failures."""
    code = ErrorCodes.STORE_FAILURE
    public_message = "Storage operation failed"


class DocumentExistsError(StoreError):
    """Raised when creating a document whose id is already taken."""
    code = ErrorCodes.DOCUMENT_EXISTS


class BatchLimitExceededError(StoreError):
    """Raised when a batch exceeds the store's per-call ceiling."""
    code = ErrorCodes.BATCH_LIMIT_EXCEEDED
