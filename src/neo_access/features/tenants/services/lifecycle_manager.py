"""Tenant lifecycle management.

Destroying a tenant is two-phase. A soft delete marks the tenant
``pending_deletion`` with a retention window; a hard delete removes every
tenant-scoped document in a fixed collection order and then the tenant
record itself. Both require a top-tier actor and an exact confirmation of
the tenant's name, and both are audited.

A hard delete that stops part-way raises ``PurgeIncompleteError`` with the
per-collection counts reached so far. Re-running it is safe: the tenant
stays ``pending_deletion`` until the last step.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Dict, Optional

from ....config.constants import (
    AuditActions,
    AuditSeverity,
    Collections,
    DeletionMode,
    ErrorCodes,
    Fields,
    SystemActors,
    TenantStatus,
)
from ....config.settings import AccessSettings
from ....core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    NameConfirmationError,
    NeoAccessError,
    PurgeIncompleteError,
    PurgeTimeoutError,
    StoreError,
    TenantNotFoundError,
    TenantStateError,
)
from ....core.shared.context import ActorContext
from ....store.protocols import DocumentStore, Query, WriteOp
from ....utils.datetime import Clock, parse_iso, to_iso, utc_now
from ...audit.services.audit_logger import AuditLogger
from ...roles.entities.role import RoleName
from ...roles.services.role_model import RoleModel
from ...tenancy.services.scope_enforcer import TenantScopeEnforcer
from ...users.services.user_directory import UserDirectory
from ..entities.outcomes import HardDeleteOutcome, SoftDeleteOutcome, SweepReport
from ..entities.tenant import Tenant

logger = logging.getLogger(__name__)

SCHEDULER_ACTOR = ActorContext(actor_id=SystemActors.SCHEDULER, role=RoleName.SUPERADMIN)


class TenantLifecycleManager:
    """Soft delete, hard purge, restore and scheduled sweep of tenants."""

    def __init__(
        self,
        store: DocumentStore,
        role_model: RoleModel,
        audit: AuditLogger,
        enforcer: TenantScopeEnforcer,
        users: UserDirectory,
        settings: AccessSettings,
        clock: Optional[Clock] = None,
    ):
        """Initialize with injected dependencies.

        Raises:
            ConfigurationError: If the purge batch size does not stay below
                the store's batch ceiling
        """
        if settings.purge_batch_size >= store.max_batch_size:
            raise ConfigurationError(
                f"purge_batch_size ({settings.purge_batch_size}) must stay below the store "
                f"batch ceiling ({store.max_batch_size})"
            )
        self._store = store
        self._role_model = role_model
        self._audit = audit
        self._enforcer = enforcer
        self._users = users
        self._settings = settings
        self._clock = clock or utc_now
        logger.debug(f"Tenant lifecycle configured: {settings.get_lifecycle_config()}")

    async def require_top_tier(self, actor: ActorContext, action: str, tenant_id: Optional[str]) -> ActorContext:
        """Hydrate ``actor`` and reject anything below the top tier.

        A rejected attempt is recorded as a CRITICAL audit entry.
        """
        actor = await self._users.hydrate(actor)
        if not self._role_model.is_top_tier(actor.role):
            await self._audit.record(
                actor.actor_id or SystemActors.UNKNOWN,
                action,
                tenant_id,
                {"actorLevel": self._role_model.level_of(actor.role)},
                AuditSeverity.CRITICAL,
            )
            raise AuthorizationError(
                "This operation is restricted to top-level administrators",
                details={"requiredLevel": self._role_model.top_level},
            )
        return actor

    async def get_tenant(self, tenant_id: str) -> Tenant:
        document = await self._store.get(Collections.TENANTS, tenant_id)
        if document is None:
            raise TenantNotFoundError(f"Tenant {tenant_id} does not exist", details={"tenantId": tenant_id})
        return Tenant.from_document(document)

    async def purge_tenant(
        self,
        actor: ActorContext,
        tenant_id: str,
        confirm_name: str,
        mode: DeletionMode = DeletionMode.SOFT,
        include_users: bool = False,
    ):
        """Soft delete or permanently purge a tenant.

        Args:
            actor: Caller; must be top tier
            tenant_id: Tenant to delete
            confirm_name: Must equal the stored tenant name exactly
            mode: ``soft`` schedules deletion, ``hard`` deletes now
            include_users: Also purge user profiles (hard mode only)

        Returns:
            ``SoftDeleteOutcome`` or ``HardDeleteOutcome``

        Raises:
            AuthorizationError: Actor is below the top tier
            TenantNotFoundError: Tenant does not exist
            NameConfirmationError: Confirmation does not match; nothing changed
            PurgeIncompleteError: Hard purge stopped part-way
        """
        actor = await self.require_top_tier(actor, AuditActions.UNAUTHORIZED_PURGE_ATTEMPT, tenant_id)
        tenant = await self.get_tenant(tenant_id)

        if tenant.name != confirm_name:
            await self._audit.record(
                actor.actor_id,
                AuditActions.PURGE_VERIFICATION_FAILED,
                tenant_id,
                {"providedName": confirm_name, "actualName": tenant.name},
                AuditSeverity.WARNING,
            )
            raise NameConfirmationError(
                "Tenant name confirmation does not match",
                details={"tenantId": tenant_id},
            )

        if DeletionMode(mode) == DeletionMode.SOFT:
            return await self._soft_delete(actor, tenant)
        return await self._hard_delete(actor, tenant, include_users)

    async def _soft_delete(self, actor: ActorContext, tenant: Tenant) -> SoftDeleteOutcome:
        now = self._clock()
        scheduled = to_iso(now + timedelta(days=self._settings.soft_delete_retention_days))
        await self._store.update(
            Collections.TENANTS,
            tenant.id,
            {
                Fields.STATUS: TenantStatus.PENDING_DELETION.value,
                "scheduledDeletionDate": scheduled,
                "deletionRequestedBy": actor.actor_id,
                "deletionRequestedAt": to_iso(now),
                "isActive": False,
            },
        )
        await self._audit.record(
            actor.actor_id,
            AuditActions.TENANT_SOFT_DELETE,
            tenant.id,
            {"tenantName": tenant.name, "scheduledDeletionDate": scheduled},
            AuditSeverity.WARNING,
        )
        logger.warning(f"Tenant {tenant.id} marked for deletion on {scheduled} by {actor.actor_id}")
        return SoftDeleteOutcome(tenant.id, tenant.name, scheduled)

    async def _hard_delete(self, actor: ActorContext, tenant: Tenant, include_users: bool) -> HardDeleteOutcome:
        collections = list(Collections.TENANT_SCOPED)
        if include_users:
            collections.extend(Collections.USER_LINKED)
        scoped_actor = actor.acting_as(tenant.id)
        counts: Dict[str, int] = {}
        current: Optional[str] = None
        now = self._clock()

        try:
            async with asyncio.timeout(self._settings.purge_timeout_seconds):
                await self._store.update(
                    Collections.TENANTS,
                    tenant.id,
                    {
                        Fields.STATUS: TenantStatus.PENDING_DELETION.value,
                        "scheduledDeletionDate": to_iso(now),
                        "deletionRequestedBy": actor.actor_id,
                        "deletionRequestedAt": to_iso(now),
                        "isActive": False,
                    },
                )
                for current in collections:
                    await self._purge_collection(scoped_actor, current, counts)
                current = Collections.TENANTS
                await self._store.delete(Collections.TENANTS, tenant.id)
        except TimeoutError as e:
            await self._record_incomplete(actor, tenant, counts, current, "timeout")
            raise PurgeTimeoutError(
                f"Purge of tenant {tenant.id} exceeded {self._settings.purge_timeout_seconds}s",
                details=self._progress(counts, current),
            ) from e
        except (StoreError, OSError) as e:
            reason = e.error_code if isinstance(e, StoreError) else ErrorCodes.STORE_FAILURE
            await self._record_incomplete(actor, tenant, counts, current, reason)
            raise PurgeIncompleteError(
                f"Purge of tenant {tenant.id} stopped at {current}",
                details=self._progress(counts, current),
            ) from e

        outcome = HardDeleteOutcome(tenant.id, tenant.name, counts)
        await self._audit.record(
            actor.actor_id,
            AuditActions.TENANT_PURGE,
            tenant.id,
            {
                "tenantName": tenant.name,
                "deletedCounts": dict(counts),
                "totalDocumentsDeleted": outcome.total_documents_deleted,
            },
            AuditSeverity.CRITICAL,
            message=f"[TENANT_PURGE] Tenant {tenant.id} ({tenant.name}) has been permanently deleted.",
        )
        logger.warning(
            f"Tenant {tenant.id} purged by {actor.actor_id}: "
            f"{outcome.total_documents_deleted} documents deleted"
        )
        return outcome

    async def _purge_collection(self, actor: ActorContext, collection: str, counts: Dict[str, int]) -> None:
        """Delete every scoped document in ``collection`` in bounded batches.

        ``counts`` is updated after each committed batch.
        """
        batch_size = self._settings.purge_batch_size
        while True:
            query = self._enforcer.scoped_query(collection, actor, limit=batch_size)
            documents = await self._store.query(query)
            if not documents:
                return
            await self._store.batch([WriteOp.delete(collection, document.id) for document in documents])
            counts[collection] = counts.get(collection, 0) + len(documents)
            logger.debug(f"Deleted {len(documents)} documents from {collection}")

    def _progress(self, counts: Dict[str, int], current: Optional[str]) -> Dict[str, object]:
        return {
            "deletedCounts": dict(counts),
            "totalDocumentsDeleted": sum(counts.values()),
            "failedCollection": current,
        }

    async def _record_incomplete(
        self,
        actor: ActorContext,
        tenant: Tenant,
        counts: Dict[str, int],
        current: Optional[str],
        reason: str,
    ) -> None:
        logger.error(f"Purge of tenant {tenant.id} incomplete at {current} ({reason}): {counts}")
        details = self._progress(counts, current)
        details.update({"tenantName": tenant.name, "reason": reason})
        await self._audit.record(
            actor.actor_id,
            AuditActions.TENANT_PURGE_INCOMPLETE,
            tenant.id,
            details,
            AuditSeverity.CRITICAL,
        )

    async def restore_tenant(self, actor: ActorContext, tenant_id: str) -> Tenant:
        """Cancel a pending deletion.

        Raises:
            AuthorizationError: Actor is below the top tier
            TenantNotFoundError: Tenant does not exist
            TenantStateError: Tenant is not pending deletion
        """
        actor = await self.require_top_tier(actor, AuditActions.UNAUTHORIZED_RESTORE_ATTEMPT, tenant_id)
        tenant = await self.get_tenant(tenant_id)
        if not tenant.is_pending_deletion:
            raise TenantStateError(
                f"Tenant {tenant_id} is not pending deletion",
                details={"status": tenant.status.value},
            )
        document = await self._store.update(
            Collections.TENANTS,
            tenant_id,
            {
                Fields.STATUS: TenantStatus.ACTIVE.value,
                "scheduledDeletionDate": None,
                "deletionRequestedBy": None,
                "deletionRequestedAt": None,
                "isActive": True,
            },
        )
        await self._audit.record(
            actor.actor_id,
            AuditActions.TENANT_RESTORED,
            tenant_id,
            {"tenantName": tenant.name, "previousSchedule": tenant.scheduled_deletion_date},
            AuditSeverity.WARNING,
        )
        logger.info(f"Tenant {tenant_id} restored by {actor.actor_id}")
        return Tenant.from_document(document)

    async def sweep_pending_deletions(self, auto_execute: Optional[bool] = None) -> SweepReport:
        """Report tenants whose retention window has passed.

        Each due tenant gets a CRITICAL audit entry. With auto-execution on
        (argument, else ``sweep_auto_execute``) the hard purge also runs under
        the scheduler identity; a failure for one tenant does not stop the
        others.
        """
        if auto_execute is None:
            auto_execute = self._settings.sweep_auto_execute
        report = SweepReport(auto_execute=auto_execute)
        now = self._clock()

        pending = await self._store.query(
            Query(Collections.TENANTS).where(Fields.STATUS, TenantStatus.PENDING_DELETION.value)
        )
        for document in pending:
            tenant = Tenant.from_document(document)
            scheduled = parse_iso(tenant.scheduled_deletion_date)
            if scheduled is None or scheduled > now:
                continue

            report.due.append(tenant.id)
            logger.warning(f"Scheduled purge due for tenant {tenant.id}")
            await self._audit.record(
                SystemActors.SCHEDULER,
                AuditActions.SCHEDULED_PURGE_DUE,
                tenant.id,
                {
                    "tenantName": tenant.name,
                    "requestedBy": tenant.deletion_requested_by,
                    "scheduledDeletionDate": tenant.scheduled_deletion_date,
                },
                AuditSeverity.CRITICAL,
            )
            if not auto_execute:
                continue
            try:
                await self.purge_tenant(SCHEDULER_ACTOR, tenant.id, tenant.name, DeletionMode.HARD)
                report.purged.append(tenant.id)
            except NeoAccessError as e:
                logger.error(f"Scheduled purge of tenant {tenant.id} failed: {e.message}")
                report.failed[tenant.id] = e.error_code

        return report
