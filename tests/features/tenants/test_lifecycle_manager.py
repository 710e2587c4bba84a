"""Tests for tenant soft delete, hard purge, restore and sweep."""

import asyncio

import pytest

from neo_access.api.factory import build_services
from neo_access.config.constants import AuditActions, AuditSeverity, DeletionMode, SystemActors
from neo_access.config.settings import AccessSettings
from neo_access.core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    NameConfirmationError,
    PurgeIncompleteError,
    PurgeTimeoutError,
    StoreError,
    TenantNotFoundError,
    TenantStateError,
    ValidationError,
)
from neo_access.features.tenants import HardDeleteOutcome, SoftDeleteOutcome, TenantLifecycleManager
from neo_access.store import InMemoryDocumentStore


class StallingStore(InMemoryDocumentStore):
    """Applies a fixed number of batches, then hangs."""

    def __init__(self, allowed_batches=None):
        super().__init__()
        self.allowed_batches = allowed_batches

    async def batch(self, ops):
        if self.allowed_batches is not None:
            if self.allowed_batches <= 0:
                await asyncio.sleep(3600)
            self.allowed_batches -= 1
        return await super().batch(ops)


class FailingStore(InMemoryDocumentStore):
    """Fails every batch touching one collection."""

    def __init__(self, fail_on="journal_entries", error=StoreError):
        super().__init__()
        self.fail_on = fail_on
        self.error = error

    async def batch(self, ops):
        if self.fail_on and any(op.collection == self.fail_on for op in ops):
            raise self.error("connection reset by peer")
        return await super().batch(ops)


@pytest.fixture
def lifecycle(services) -> TenantLifecycleManager:
    return services.lifecycle


class TestPurgeAuthorization:
    """Test the guards in front of every purge."""

    @pytest.mark.asyncio
    async def test_name_mismatch_changes_nothing(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        with pytest.raises(ValidationError) as exc_info:
            await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme", DeletionMode.HARD)

        assert isinstance(exc_info.value, NameConfirmationError)
        tenant = await store.get("tenants", acme_tenant)
        assert tenant.data["status"] == "active"
        assert store.count("tasks", tenantId="5") == 12
        assert store.count("projects", tenantId="5") == 3
        assert len(audit_sink.entries) == 1
        [entry] = audit_sink.entries
        assert entry.severity == AuditSeverity.WARNING
        assert entry.action == AuditActions.PURGE_VERIFICATION_FAILED
        assert entry.details == {"providedName": "Acme", "actualName": "Acme Corp"}

    @pytest.mark.asyncio
    async def test_name_match_is_exact(self, lifecycle, acme_tenant, superadmin):
        with pytest.raises(NameConfirmationError):
            await lifecycle.purge_tenant(superadmin, acme_tenant, "acme corp")
        with pytest.raises(NameConfirmationError):
            await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp ")

    @pytest.mark.asyncio
    async def test_below_top_tier_is_rejected_and_audited(self, lifecycle, acme_tenant, app_admin, store, audit_sink):
        with pytest.raises(AuthorizationError):
            await lifecycle.purge_tenant(app_admin, acme_tenant, "Acme Corp", DeletionMode.HARD)

        assert (await store.get("tenants", acme_tenant)).data["status"] == "active"
        [entry] = audit_sink.entries
        assert entry.severity == AuditSeverity.CRITICAL
        assert entry.action == AuditActions.UNAUTHORIZED_PURGE_ATTEMPT
        assert entry.actor_id == "admin-1"
        assert entry.is_alert

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, lifecycle, superadmin):
        with pytest.raises(TenantNotFoundError):
            await lifecycle.purge_tenant(superadmin, "404", "Nobody")

    def test_batch_size_must_fit_store_ceiling(self, services, settings):
        with pytest.raises(ConfigurationError):
            TenantLifecycleManager(
                InMemoryDocumentStore(max_batch_size=100),
                services.role_model,
                services.audit,
                services.enforcer,
                services.users,
                settings,
            )


class TestSoftDelete:
    """Test scheduling a tenant for deletion."""

    @pytest.mark.asyncio
    async def test_soft_delete_keeps_data(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        outcome = await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")

        assert isinstance(outcome, SoftDeleteOutcome)
        assert outcome.scheduled_deletion_date == "2025-02-14T12:00:00.000Z"
        tenant = (await store.get("tenants", acme_tenant)).data
        assert tenant["status"] == "pending_deletion"
        assert tenant["scheduledDeletionDate"] == "2025-02-14T12:00:00.000Z"
        assert tenant["deletionRequestedBy"] == "root"
        assert tenant["name"] == "Acme Corp"
        assert store.count("tasks", tenantId="5") == 12
        assert store.count("journal_entries", tenantId="5") == 7
        [entry] = audit_sink.by_action(AuditActions.TENANT_SOFT_DELETE)
        assert entry.severity == AuditSeverity.WARNING

    @pytest.mark.asyncio
    async def test_repeat_soft_delete_resets_schedule(self, lifecycle, acme_tenant, superadmin, clock):
        await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")
        clock.advance(days=1)
        outcome = await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")
        assert outcome.scheduled_deletion_date == "2025-02-15T12:00:00.000Z"


class TestHardDelete:
    """Test permanent tenant purges."""

    @pytest.mark.asyncio
    async def test_hard_delete_counts_and_audit(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        outcome = await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD)

        assert isinstance(outcome, HardDeleteOutcome)
        assert outcome.deleted_counts == {"tasks": 12, "projects": 3, "journal_entries": 7}
        assert outcome.total_documents_deleted == 22
        assert await store.get("tenants", acme_tenant) is None
        for collection in ("tasks", "projects", "journal_entries", "weekly_entries", "invites"):
            assert store.count(collection, tenantId="5") == 0

        # Other tenants and user profiles are untouched
        assert store.count("tasks", tenantId="6") == 1
        assert store.count("projects", tenantId="6") == 1
        assert await store.get("tenants", "6") is not None
        assert store.count("users", tenantId="5") == 1

        [entry] = audit_sink.by_severity(AuditSeverity.CRITICAL)
        assert entry.action == AuditActions.TENANT_PURGE
        assert entry.details["totalDocumentsDeleted"] == 22
        assert entry.details["deletedCounts"] == outcome.deleted_counts
        assert entry.message == "[TENANT_PURGE] Tenant 5 (Acme Corp) has been permanently deleted."
        assert outcome.to_dict()["totalDocumentsDeleted"] == 22

    @pytest.mark.asyncio
    async def test_include_users(self, lifecycle, acme_tenant, superadmin, store):
        outcome = await lifecycle.purge_tenant(
            superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD, include_users=True
        )
        assert outcome.deleted_counts["users"] == 1
        assert store.count("users", tenantId="5") == 0

    @pytest.mark.asyncio
    async def test_deletes_in_bounded_batches(self, store, audit_sink, clock, acme_tenant, superadmin, mocker):
        settings = AccessSettings(_env_file=None, purge_batch_size=5)
        lifecycle = build_services(settings=settings, store=store, sinks=[audit_sink], clock=clock).lifecycle
        spy = mocker.spy(store, "batch")

        outcome = await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", "hard")

        assert outcome.total_documents_deleted == 22
        # projects: 3, tasks: 5 + 5 + 2, journal_entries: 5 + 2
        assert spy.call_count == 6
        assert all(len(call.args[0]) <= 5 for call in spy.call_args_list)


class TestPurgeTimeout:
    """A purge that runs out of time reports how far it got and can be resumed."""

    @pytest.fixture
    def store(self):
        return StallingStore(allowed_batches=2)

    @pytest.fixture
    def settings(self):
        return AccessSettings(_env_file=None, purge_batch_size=5, purge_timeout_seconds=0.05)

    @pytest.mark.asyncio
    async def test_timeout_reports_partial_counts(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        with pytest.raises(PurgeTimeoutError) as exc_info:
            await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD)

        details = exc_info.value.details
        assert details["deletedCounts"] == {"projects": 3, "tasks": 5}
        assert details["totalDocumentsDeleted"] == 8
        assert details["failedCollection"] == "tasks"
        tenant = await store.get("tenants", acme_tenant)
        assert tenant.data["status"] == "pending_deletion"
        [entry] = audit_sink.by_action(AuditActions.TENANT_PURGE_INCOMPLETE)
        assert entry.severity == AuditSeverity.CRITICAL
        assert entry.details["reason"] == "timeout"

        store.allowed_batches = None
        outcome = await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD)
        assert outcome.deleted_counts == {"tasks": 7, "journal_entries": 7}
        assert await store.get("tenants", acme_tenant) is None


class TestPurgeStoreFailure:
    """A store failure mid-purge surfaces partial progress."""

    @pytest.fixture
    def store(self):
        return FailingStore()

    @pytest.mark.asyncio
    async def test_store_failure_reports_partial_counts(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        with pytest.raises(PurgeIncompleteError) as exc_info:
            await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD)

        assert type(exc_info.value) is PurgeIncompleteError
        assert exc_info.value.details["deletedCounts"] == {"projects": 3, "tasks": 12}
        assert exc_info.value.details["failedCollection"] == "journal_entries"
        assert store.count("journal_entries", tenantId="5") == 7
        assert await store.get("tenants", acme_tenant) is not None
        [entry] = audit_sink.by_action(AuditActions.TENANT_PURGE_INCOMPLETE)
        assert entry.details["reason"] == "STORE_001"


class TestPurgeConnectionReset:
    """A transport failure outside the store error hierarchy still reports progress."""

    @pytest.fixture
    def store(self):
        return FailingStore(error=ConnectionResetError)

    @pytest.mark.asyncio
    async def test_connection_reset_reports_partial_counts(self, lifecycle, acme_tenant, superadmin, store, audit_sink):
        with pytest.raises(PurgeIncompleteError) as exc_info:
            await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp", DeletionMode.HARD)

        assert isinstance(exc_info.value.__cause__, ConnectionResetError)
        assert exc_info.value.details["deletedCounts"] == {"projects": 3, "tasks": 12}
        assert exc_info.value.details["failedCollection"] == "journal_entries"
        [entry] = audit_sink.by_action(AuditActions.TENANT_PURGE_INCOMPLETE)
        assert entry.severity == AuditSeverity.CRITICAL
        assert entry.details["reason"] == "STORE_001"
        assert entry.details["deletedCounts"] == {"projects": 3, "tasks": 12}


class TestRestore:
    """Test cancelling a pending deletion."""

    @pytest.mark.asyncio
    async def test_restore(self, lifecycle, acme_tenant, superadmin, audit_sink):
        await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")

        tenant = await lifecycle.restore_tenant(superadmin, acme_tenant)

        assert tenant.status.value == "active"
        assert tenant.is_active
        assert tenant.scheduled_deletion_date is None
        [entry] = audit_sink.by_action(AuditActions.TENANT_RESTORED)
        assert entry.details["previousSchedule"] == "2025-02-14T12:00:00.000Z"

    @pytest.mark.asyncio
    async def test_restore_requires_pending_deletion(self, lifecycle, acme_tenant, superadmin):
        with pytest.raises(TenantStateError):
            await lifecycle.restore_tenant(superadmin, acme_tenant)

    @pytest.mark.asyncio
    async def test_restore_below_top_tier(self, lifecycle, acme_tenant, app_admin, audit_sink):
        with pytest.raises(AuthorizationError):
            await lifecycle.restore_tenant(app_admin, acme_tenant)
        [entry] = audit_sink.by_action(AuditActions.UNAUTHORIZED_RESTORE_ATTEMPT)
        assert entry.severity == AuditSeverity.CRITICAL


class TestSweep:
    """Test the scheduled sweep of pending deletions."""

    @pytest.mark.asyncio
    async def test_sweep_reports_due_tenants_without_deleting(
        self, lifecycle, acme_tenant, superadmin, store, audit_sink, clock
    ):
        await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")

        early = await lifecycle.sweep_pending_deletions()
        assert early.due == []

        clock.advance(days=30)
        report = await lifecycle.sweep_pending_deletions()

        assert report.due == ["5"]
        assert report.purged == []
        assert not report.auto_execute
        assert await store.get("tenants", acme_tenant) is not None
        [entry] = audit_sink.by_action(AuditActions.SCHEDULED_PURGE_DUE)
        assert entry.severity == AuditSeverity.CRITICAL
        assert entry.actor_id == SystemActors.SCHEDULER
        assert entry.details["requestedBy"] == "root"

    @pytest.mark.asyncio
    async def test_sweep_auto_execute(self, lifecycle, acme_tenant, superadmin, store, audit_sink, clock):
        await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")
        clock.advance(days=31)

        report = await lifecycle.sweep_pending_deletions(auto_execute=True)

        assert report.to_dict() == {"due": ["5"], "purged": ["5"], "failed": {}, "autoExecute": True}
        assert await store.get("tenants", acme_tenant) is None
        assert store.count("tasks", tenantId="5") == 0
        [entry] = audit_sink.by_action(AuditActions.TENANT_PURGE)
        assert entry.actor_id == SystemActors.SCHEDULER
        assert entry.details["totalDocumentsDeleted"] == 22


class TestSweepFailure:
    """One failing tenant does not stop the sweep."""

    @pytest.fixture
    def store(self):
        return FailingStore()

    @pytest.mark.asyncio
    async def test_failures_are_collected(self, lifecycle, acme_tenant, superadmin, store, clock):
        await store.set("tenants", "7", {"name": "Quiet Ltd", "status": "active"})
        await lifecycle.purge_tenant(superadmin, acme_tenant, "Acme Corp")
        await lifecycle.purge_tenant(superadmin, "7", "Quiet Ltd")
        clock.advance(days=30)

        report = await lifecycle.sweep_pending_deletions(auto_execute=True)

        assert sorted(report.due) == ["5", "7"]
        assert report.purged == ["7"]
        assert report.failed == {"5": "PURGE_001"}
