"""neo-access application factory.

Wires settings, the document store, audit sinks and every service into an
``AccessServices`` container, and builds a FastAPI application exposing
them. Routers resolve their services through ``dependency_overrides``.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi import FastAPI

from ..__version__ import __version__
from ..config.logging_config import setup_logging
from ..config.settings import AccessSettings, get_settings
from ..features.audit import AuditLogger, AuditSink, LoggingAuditSink, StoreAuditSink
from ..features.invites.routers import get_invite_service, invite_router
from ..features.invites.services import InviteService
from ..features.permissions.routers import capability_router, get_permission_resolver
from ..features.permissions.services import PermissionGroupSeeder, PermissionResolver
from ..features.roles import RoleModel
from ..features.tenancy import TenantScopeEnforcer
from ..features.tenants.routers import get_lifecycle_manager, tenant_router
from ..features.tenants.services import TenantLifecycleManager
from ..features.users import UserDirectory
from ..store import AsyncPGDocumentStore, DocumentStore, InMemoryDocumentStore
from ..utils.datetime import Clock
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)


@dataclass
class AccessServices:
    """Container for the wired access-control services."""

    settings: AccessSettings
    store: DocumentStore
    role_model: RoleModel
    audit: AuditLogger
    users: UserDirectory
    enforcer: TenantScopeEnforcer
    resolver: PermissionResolver
    seeder: PermissionGroupSeeder
    invites: InviteService
    lifecycle: TenantLifecycleManager


def build_store(settings: AccessSettings) -> DocumentStore:
    """PostgreSQL store when a database URL is configured, else in-memory."""
    if settings.database_url:
        return AsyncPGDocumentStore(
            settings.database_url,
            table=settings.documents_table,
            max_batch_size=settings.store_batch_ceiling,
        )
    logger.warning("No database_url configured, using the in-memory document store")
    return InMemoryDocumentStore(max_batch_size=settings.store_batch_ceiling)


def build_services(
    settings: Optional[AccessSettings] = None,
    store: Optional[DocumentStore] = None,
    sinks: Optional[Sequence[AuditSink]] = None,
    clock: Optional[Clock] = None,
) -> AccessServices:
    """Wire every service from settings.

    Args:
        settings: Configuration, defaults to ``get_settings()``
        store: Document store, built from settings if omitted
        sinks: Audit sinks, defaults to the audit logger plus the store
        clock: Shared time source
    """
    settings = settings or get_settings()
    store = store or build_store(settings)
    role_model = RoleModel.from_settings(settings)
    if sinks is None:
        sinks = [LoggingAuditSink(), StoreAuditSink(store)]
    audit = AuditLogger(
        sinks,
        delivery_attempts=settings.audit_delivery_attempts,
        clock=clock,
        max_pending=settings.audit_max_pending,
    )
    users = UserDirectory(store, role_model)
    enforcer = TenantScopeEnforcer(role_model, store)
    return AccessServices(
        settings=settings,
        store=store,
        role_model=role_model,
        audit=audit,
        users=users,
        enforcer=enforcer,
        resolver=PermissionResolver(store, role_model, users),
        seeder=PermissionGroupSeeder(store, clock=clock),
        invites=InviteService(store, role_model, audit, users, settings, enforcer=enforcer, clock=clock),
        lifecycle=TenantLifecycleManager(store, role_model, audit, enforcer, users, settings, clock=clock),
    )


def create_app(services: Optional[AccessServices] = None, api_prefix: str = "") -> FastAPI:
    """Create the neo-access FastAPI application.

    Args:
        services: Wired services, built from settings if omitted
        api_prefix: Path prefix for every router

    Returns:
        Configured FastAPI application
    """
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        setup_logging(services.settings.log_verbosity, services.settings.log_format)
        logger.info(f"{services.settings.app_name} starting ({services.settings.environment})")
        ensure_schema = getattr(services.store, "ensure_schema", None)
        if ensure_schema is not None:
            await ensure_schema()
        yield
        pending = await services.audit.flush()
        if pending:
            logger.error(f"Shutting down with {pending} undelivered audit entries")
        close_pool = getattr(services.store, "close_pool", None)
        if close_pool is not None:
            await close_pool()

    app = FastAPI(
        title=services.settings.app_name,
        version=__version__,
        description="Multi-tenant RBAC, invitations and tenant lifecycle",
        lifespan=lifespan,
    )
    app.state.services = services

    app.include_router(invite_router, prefix=api_prefix)
    app.include_router(tenant_router, prefix=api_prefix)
    app.include_router(capability_router, prefix=api_prefix)

    app.dependency_overrides[get_invite_service] = lambda: services.invites
    app.dependency_overrides[get_lifecycle_manager] = lambda: services.lifecycle
    app.dependency_overrides[get_permission_resolver] = lambda: services.resolver

    register_exception_handlers(app, is_production=services.settings.is_production)
    return app
