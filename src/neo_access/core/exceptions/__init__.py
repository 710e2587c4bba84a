"""Exceptions module for neo-access.

This module provides the complete exception hierarchy for neo-access.
"""

from .base import (
    NeoAccessError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Authorization Errors
    AuthorizationError,
    EscalationError,
    TenantIsolationError,

    # Abuse limits
    RateLimitError,

    # Lookups
    NotFoundError,
    TenantNotFoundError,
    InviteNotFoundError,

    # Validation Errors
    ValidationError,
    NameConfirmationError,
    InviteExpiredError,
    InviteRevokedError,
    TenantStateError,

    # Conflicts
    ConflictError,
    ConcurrencyError,

    # Tenant purge
    PurgeIncompleteError,
    PurgeTimeoutError,

    # Infrastructure
    ConfigurationError,
    StoreError,
    DocumentExistsError,
    BatchLimitExceededError,
)

from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    # Base
    "NeoAccessError",
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",

    # Authorization
    "AuthorizationError",
    "EscalationError",
    "TenantIsolationError",
    "RateLimitError",

    # Lookups
    "NotFoundError",
    "TenantNotFoundError",
    "InviteNotFoundError",

    # Validation
    "ValidationError",
    "NameConfirmationError",
    "InviteExpiredError",
    "InviteRevokedError",
    "TenantStateError",

    # Conflicts
    "ConflictError",
    "ConcurrencyError",

    # Purge
    "PurgeIncompleteError",
    "PurgeTimeoutError",

    # Infrastructure
    "ConfigurationError",
    "StoreError",
    "DocumentExistsError",
    "BatchLimitExceededError",
]
