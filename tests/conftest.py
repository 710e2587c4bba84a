"""Pytest configuration and fixtures for neo-access tests."""

from datetime import datetime, timedelta, timezone
from typing import List

import pytest
import pytest_asyncio

from neo_access.api.factory import AccessServices, build_services
from neo_access.config.settings import AccessSettings
from neo_access.core.shared.context import ActorContext
from neo_access.features.audit.entities.audit_entry import AuditLogEntry
from neo_access.features.roles.entities.role import RoleName
from neo_access.features.roles.services.role_model import RoleModel
from neo_access.store.memory_store import InMemoryDocumentStore


FROZEN_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime = FROZEN_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class CaptureSink:
    """Audit sink keeping every delivered entry in memory."""

    def __init__(self):
        self.entries: List[AuditLogEntry] = []

    async def emit(self, entry: AuditLogEntry) -> None:
        self.entries.append(entry)

    def by_action(self, action: str) -> List[AuditLogEntry]:
        return [entry for entry in self.entries if entry.action == action]

    def by_severity(self, severity) -> List[AuditLogEntry]:
        return [entry for entry in self.entries if entry.severity == severity]


@pytest.fixture
def settings():
    """Settings isolated from the environment and any local .env file."""
    return AccessSettings(_env_file=None, environment="test")


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def role_model():
    return RoleModel()


@pytest.fixture
def audit_sink():
    return CaptureSink()


@pytest.fixture
def services(settings, store, audit_sink, clock) -> AccessServices:
    return build_services(settings=settings, store=store, sinks=[audit_sink], clock=clock)


@pytest.fixture
def superadmin():
    return ActorContext(actor_id="root", role=RoleName.SUPERADMIN.value)


@pytest.fixture
def app_admin():
    return ActorContext(actor_id="admin-1", tenant_id="T1", role=RoleName.APP_ADMIN.value)


@pytest.fixture
def project_manager():
    return ActorContext(actor_id="pm-1", tenant_id="T1", role=RoleName.PROJECT_MANAGER.value)


@pytest.fixture
def member():
    return ActorContext(actor_id="member-1", tenant_id="T1", role=RoleName.BASE_USER.value)


@pytest_asyncio.fixture
async def acme_tenant(store):
    """Tenant "5" named "Acme Corp" with dependent data in two tenants."""
    await store.set("tenants", "5", {"name": "Acme Corp", "status": "active", "isActive": True})
    await store.set("tenants", "6", {"name": "Other Inc", "status": "active", "isActive": True})
    for i in range(12):
        await store.set("tasks", f"task-{i}", {"tenantId": "5", "title": f"Task {i}"})
    for i in range(3):
        await store.set("projects", f"project-{i}", {"tenantId": "5", "name": f"Project {i}"})
    for i in range(7):
        await store.set("journal_entries", f"journal-{i}", {"tenantId": "5", "text": "entry"})
    await store.set("users", "acme-user", {"tenantId": "5", "role": "usuario_base"})
    await store.set("tasks", "other-task", {"tenantId": "6", "title": "Keep me"})
    await store.set("projects", "other-project", {"tenantId": "6", "name": "Keep me"})
    return "5"
