"""
Exception handlers for the neo-access FastAPI surface.

Typed failures become ``{"error": {"code", "message", "details"}}`` bodies
with the mapped HTTP status. Store failures and unexpected exceptions are
reported with a generic message so no driver text or stack reaches callers.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..config.constants import ErrorCodes
from ..core.exceptions import NeoAccessError, StoreError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the neo-access exception handlers on an application."""

    def __init__(self, is_production: bool = True):
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application.

        Args:
            app: FastAPI application instance
        """
        @app.exception_handler(NeoAccessError)
        async def neo_access_exception_handler(request: Request, exc: NeoAccessError):
            """Handle typed access-control failures."""
            status_code = get_http_status_code(exc)
            if isinstance(exc, StoreError) or status_code >= 500:
                logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
            else:
                logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.error_code}")
            body = create_error_response(exc)
            if isinstance(exc, StoreError):
                body["error"]["details"] = {}
            return JSONResponse(status_code=status_code, content=body)

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": {"code": ErrorCodes.INTERNAL, "message": message, "details": {}}},
            )


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """
    Register exception handlers for a FastAPI application.

    Convenience wrapper around ``ExceptionHandlerRegistry``.
    """
    ExceptionHandlerRegistry(is_production=is_production).register_handlers(app)
