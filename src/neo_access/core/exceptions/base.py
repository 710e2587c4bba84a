"""Base exceptions for neo-access.

This module defines the root of the exception hierarchy. Every exception
carries a short, stable error code, a human-readable message and an
optional details mapping that is safe to hand back to callers.
"""

from typing import Any, Dict, Optional

from ...config.constants import ErrorCodes


class NeoAccessError(Exception):
    """Base exception for all neo-access errors.

    Subclasses set ``code`` to a stable identifier from ``ErrorCodes`` and may
    set ``public_message`` to hide the internal message from API callers.
    """

    code: str = ErrorCodes.INTERNAL
    public_message: Optional[str] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses."""
        return {
            "code": self.error_code,
            "message": self.public_message or self.message,
            "details": self.details,
        }


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _lookup
    return _lookup(exception)


def create_error_response(exception: NeoAccessError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-access exception

    Returns:
        Error response dictionary
    """
    return {"error": exception.to_dict()}
