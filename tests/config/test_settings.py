"""Tests for access settings."""

import pytest
from pydantic import ValidationError

from neo_access.config.settings import AccessSettings


class TestAccessSettings:
    """Test defaults and cross-field validation."""

    def test_defaults(self, settings):
        assert settings.admin_threshold == 80
        assert settings.top_level == 100
        assert settings.invite_quota == 5
        assert settings.invite_code_length == 8
        assert settings.soft_delete_retention_days == 30
        assert settings.purge_batch_size < settings.store_batch_ceiling
        assert settings.invite_ttl_days is None
        assert settings.sweep_auto_execute is False
        assert not settings.is_production

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("NEO_ACCESS_INVITE_QUOTA", "10")
        monkeypatch.setenv("NEO_ACCESS_ENVIRONMENT", "production")
        settings = AccessSettings(_env_file=None)
        assert settings.invite_quota == 10
        assert settings.is_production

    def test_purge_batch_must_stay_below_ceiling(self):
        with pytest.raises(ValidationError):
            AccessSettings(_env_file=None, purge_batch_size=500, store_batch_ceiling=500)

    def test_admin_threshold_cannot_exceed_top_level(self):
        with pytest.raises(ValidationError):
            AccessSettings(_env_file=None, admin_threshold=90, top_level=85)

    def test_alphabet_must_not_repeat(self):
        with pytest.raises(ValidationError):
            AccessSettings(_env_file=None, invite_code_alphabet="AABCDEFGHJKLMNPQ")

    def test_lifecycle_config(self, settings):
        config = settings.get_lifecycle_config()
        assert config["soft_delete_retention_days"] == 30
        assert config["sweep_auto_execute"] is False
