"""
Access-control configuration for neo-access.

Thresholds, quotas and purge budgets are configuration, never magic numbers
inside call sites. Values load from the environment (prefix ``NEO_ACCESS_``)
or a local ``.env`` file.
"""
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccessSettings(BaseSettings):
    """Settings for the RBAC, invitation and tenant lifecycle core."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_ACCESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="neo-access")
    environment: str = Field(default="development")

    # Role thresholds
    admin_threshold: int = Field(default=80, ge=0, le=100)
    top_level: int = Field(default=100, ge=0, le=100)

    # Invitations
    invite_quota: int = Field(default=5, ge=0)
    invite_code_length: int = Field(default=8, ge=4, le=32)
    invite_code_alphabet: str = Field(
        default="ABCDEFGHJKLMNPQRSTUVWXYZ23456789",
        min_length=16,
        description="Alphabet without visually confusable glyphs (no I, O, 0, 1)",
    )
    invite_max_generation_attempts: int = Field(default=5, ge=1, le=50)
    invite_ttl_days: Optional[int] = Field(default=None, ge=1)

    # Tenant lifecycle
    soft_delete_retention_days: int = Field(default=30, ge=1)
    purge_batch_size: int = Field(default=400, ge=1)
    store_batch_ceiling: int = Field(default=500, ge=1)
    purge_timeout_seconds: float = Field(default=540.0, gt=0)
    sweep_auto_execute: bool = Field(default=False)

    # Audit
    audit_delivery_attempts: int = Field(default=3, ge=1, le=10)
    audit_max_pending: int = Field(default=1000, ge=1)

    # Storage
    database_url: Optional[str] = Field(default=None)
    documents_table: str = Field(default="documents", pattern=r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")

    # Logging
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")

    @model_validator(mode="after")
    def _check_consistency(self) -> "AccessSettings":
        """Validate cross-field constraints."""
        if self.admin_threshold > self.top_level:
            raise ValueError("admin_threshold cannot exceed top_level")
        if self.purge_batch_size >= self.store_batch_ceiling:
            raise ValueError(
                f"purge_batch_size ({self.purge_batch_size}) must stay strictly below "
                f"store_batch_ceiling ({self.store_batch_ceiling})"
            )
        if len(set(self.invite_code_alphabet)) != len(self.invite_code_alphabet):
            raise ValueError("invite_code_alphabet must not contain repeated characters")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_lifecycle_config(self) -> Dict[str, Any]:
        """Get tenant lifecycle configuration as a plain mapping."""
        return {
            "soft_delete_retention_days": self.soft_delete_retention_days,
            "purge_batch_size": self.purge_batch_size,
            "store_batch_ceiling": self.store_batch_ceiling,
            "purge_timeout_seconds": self.purge_timeout_seconds,
            "sweep_auto_execute": self.sweep_auto_execute,
        }


@lru_cache()
def get_settings() -> AccessSettings:
    """Get cached settings instance."""
    return AccessSettings()
