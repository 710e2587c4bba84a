"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoAccessError
from .domain import (
    AuthorizationError,
    ConcurrencyError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    PurgeIncompleteError,
    RateLimitError,
    StoreError,
    ValidationError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 403 Forbidden
    AuthorizationError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    ConcurrencyError: 409,

    # 429 Too Many Requests
    RateLimitError: 429,

    # 500 Internal Server Error
    PurgeIncompleteError: 500,
    ConfigurationError: 500,
    StoreError: 500,

    # Default for NeoAccessError
    NeoAccessError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code of the closest mapped ancestor class."""
    for cls in type(exception).__mro__:
        if cls in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[cls]
    return 500
