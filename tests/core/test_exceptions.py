"""Tests for the exception hierarchy and its HTTP mapping."""

import pytest

from neo_access.core.exceptions import (
    AuthorizationError,
    BatchLimitExceededError,
    ConcurrencyError,
    ConflictError,
    EscalationError,
    InviteNotFoundError,
    NameConfirmationError,
    NeoAccessError,
    PurgeTimeoutError,
    RateLimitError,
    StoreError,
    TenantIsolationError,
    create_error_response,
    get_http_status_code,
)


class TestExceptions:
    """Test error codes and serialization."""

    def test_error_codes(self):
        assert EscalationError("x").error_code == "AUTHZ_002"
        assert NameConfirmationError("x").error_code == "VALID_002"
        assert NeoAccessError("x").error_code == "INTERNAL_001"
        assert ConflictError("x", error_code="CUSTOM").error_code == "CUSTOM"

    def test_hierarchy(self):
        assert issubclass(EscalationError, AuthorizationError)
        assert issubclass(TenantIsolationError, AuthorizationError)
        assert issubclass(BatchLimitExceededError, StoreError)

    def test_store_errors_hide_internal_message(self):
        body = create_error_response(StoreError("relation documents does not exist", details={"sql": "..."}))
        assert body["error"]["message"] == "Storage operation failed"
        assert body["error"]["code"] == "STORE_001"

    def test_error_response(self):
        error = RateLimitError("Invite limit reached", details={"quota": 5})
        assert create_error_response(error) == {
            "error": {"code": "RATE_001", "message": "Invite limit reached", "details": {"quota": 5}}
        }

    @pytest.mark.parametrize(
        "error, status",
        [
            (EscalationError("x"), 403),
            (TenantIsolationError("x"), 403),
            (RateLimitError("x"), 429),
            (InviteNotFoundError("x"), 404),
            (NameConfirmationError("x"), 400),
            (ConflictError("x"), 409),
            (ConcurrencyError("x"), 409),
            (PurgeTimeoutError("x"), 500),
            (StoreError("x"), 500),
            (ValueError("x"), 500),
        ],
    )
    def test_http_status(self, error, status):
        assert get_http_status_code(error) == status
