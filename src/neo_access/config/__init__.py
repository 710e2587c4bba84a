"""Configuration module for neo-access.

Settings, constants and logging setup shared by every feature.
"""

from .constants import (
    AuditActions,
    AuditSeverity,
    Collections,
    DeletionMode,
    ErrorCodes,
    Fields,
    Headers,
    InviteCheckReasons,
    SystemActors,
    TenantStatus,
)
from .logging_config import AUDIT_LOGGER_NAME, LoggingConfig, setup_logging
from .settings import AccessSettings, get_settings

__all__ = [
    # Settings
    "AccessSettings",
    "get_settings",

    # Constants
    "AuditActions",
    "AuditSeverity",
    "Collections",
    "DeletionMode",
    "ErrorCodes",
    "Fields",
    "Headers",
    "InviteCheckReasons",
    "SystemActors",
    "TenantStatus",

    # Logging
    "AUDIT_LOGGER_NAME",
    "LoggingConfig",
    "setup_logging",
]
