"""Constants and enums for neo-access.

This module defines the constants, enums, and stored value vocabularies
used throughout the neo-access library. Enum values are the exact strings
persisted in tenant, invite and audit documents.
"""

from enum import Enum
from typing import Final, Tuple


class TenantStatus(str, Enum):
    """Tenant lifecycle status - stored in tenants.status."""

    ACTIVE = "active"
    PENDING_DELETION = "pending_deletion"
    DELETED = "deleted"


class DeletionMode(str, Enum):
    """Tenant purge modes."""

    SOFT = "soft"
    HARD = "hard"


class AuditSeverity(str, Enum):
    """Audit log severities, ordered from routine to destructive."""

    NOTICE = "NOTICE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Collections:
    """Document collection names."""

    TENANTS: Final[str] = "tenants"
    USERS: Final[str] = "users"
    LEGACY_USERS: Final[str] = "user"
    INVITES: Final[str] = "invites"
    PERMISSION_GROUPS: Final[str] = "permission_groups"
    PROJECTS: Final[str] = "projects"
    TASKS: Final[str] = "tasks"
    JOURNAL_ENTRIES: Final[str] = "journal_entries"
    WEEKLY_ENTRIES: Final[str] = "weekly_entries"
    AUDIT_LOGS: Final[str] = "audit_logs"

    # Purge order is part of the audit contract; do not reorder.
    TENANT_SCOPED: Final[Tuple[str, ...]] = (
        PROJECTS,
        TASKS,
        JOURNAL_ENTRIES,
        WEEKLY_ENTRIES,
        PERMISSION_GROUPS,
        INVITES,
    )

    USER_LINKED: Final[Tuple[str, ...]] = (USERS, LEGACY_USERS)


class Fields:
    """Document field names shared across collections."""

    TENANT_ID: Final[str] = "tenantId"
    CREATED_BY: Final[str] = "createdBy"
    STATUS: Final[str] = "status"


class SystemActors:
    """Identities used for actions not initiated by a person."""

    SCHEDULER: Final[str] = "SYSTEM_SCHEDULER"
    UNKNOWN: Final[str] = "unknown"


class AuditActions:
    """Audit action tags."""

    UNAUTHORIZED_PURGE_ATTEMPT: Final[str] = "UNAUTHORIZED_PURGE_ATTEMPT"
    PURGE_VERIFICATION_FAILED: Final[str] = "PURGE_VERIFICATION_FAILED"
    TENANT_SOFT_DELETE: Final[str] = "TENANT_SOFT_DELETE"
    TENANT_PURGE: Final[str] = "TENANT_PURGE"
    TENANT_PURGE_INCOMPLETE: Final[str] = "TENANT_PURGE_INCOMPLETE"
    TENANT_RESTORED: Final[str] = "TENANT_RESTORED"
    UNAUTHORIZED_RESTORE_ATTEMPT: Final[str] = "UNAUTHORIZED_RESTORE_ATTEMPT"
    SCHEDULED_PURGE_DUE: Final[str] = "SCHEDULED_PURGE_DUE"

    INVITE_UNAUTHORIZED: Final[str] = "INVITE_UNAUTHORIZED_ATTEMPT"
    INVITE_ESCALATION_ATTEMPT: Final[str] = "INVITE_ESCALATION_ATTEMPT"
    INVITE_CROSS_TENANT_ATTEMPT: Final[str] = "INVITE_CROSS_TENANT_ATTEMPT"
    INVITE_CONSUMED: Final[str] = "INVITE_CONSUMED"
    INVITE_REVOKED: Final[str] = "INVITE_REVOKED"

    DATA_ACCESS: Final[str] = "DATA_ACCESS"
    DATA_MODIFICATION: Final[str] = "DATA_MODIFICATION"
    DATA_DELETION: Final[str] = "DATA_DELETION"


class InviteCheckReasons:
    """Stable reasons returned by invite pre-flight checks."""

    MISSING_CODE: Final[str] = "missing_code"
    NOT_FOUND: Final[str] = "not_found"
    ALREADY_USED: Final[str] = "already_used"
    EXPIRED: Final[str] = "expired"
    REVOKED: Final[str] = "revoked"


# Error Codes
class ErrorCodes:
    """Standardized error codes."""

    # Authorization
    AUTHORIZATION_DENIED = "AUTHZ_001"
    ESCALATION_BLOCKED = "AUTHZ_002"
    TENANT_ISOLATION = "AUTHZ_003"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "RATE_001"

    # Lookups
    NOT_FOUND = "NOT_FOUND_001"
    TENANT_NOT_FOUND = "NOT_FOUND_002"
    INVITE_NOT_FOUND = "NOT_FOUND_003"

    # Validation
    VALIDATION_FAILED = "VALID_001"
    NAME_CONFIRMATION_MISMATCH = "VALID_002"
    INVITE_EXPIRED = "VALID_003"
    INVALID_TENANT_STATE = "VALID_004"
    INVITE_REVOKED = "VALID_005"

    # Conflicts
    CONFLICT = "CONFLICT_001"
    CONCURRENCY = "CONCURRENCY_001"

    # Tenant purge
    PURGE_INCOMPLETE = "PURGE_001"
    PURGE_TIMEOUT = "PURGE_002"

    # Infrastructure
    CONFIG_INVALID = "CONFIG_001"
    STORE_FAILURE = "STORE_001"
    DOCUMENT_EXISTS = "STORE_002"
    BATCH_LIMIT_EXCEEDED = "STORE_003"
    INTERNAL = "INTERNAL_001"


class Headers:
    """HTTP headers carrying identity provider claims."""

    USER_ID = "X-User-ID"
    TENANT_ID = "X-Tenant-ID"
    USER_ROLE = "X-User-Role"
    ACTING_AS_TENANT = "X-Acting-As-Tenant"
    REQUEST_ID = "X-Request-ID"
