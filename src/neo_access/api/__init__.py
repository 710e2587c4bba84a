"""HTTP surface for neo-access."""

from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers
from .factory import AccessServices, build_services, build_store, create_app

__all__ = [
    "AccessServices",
    "ExceptionHandlerRegistry",
    "build_services",
    "build_store",
    "create_app",
    "register_exception_handlers",
]
