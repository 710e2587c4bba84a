"""Invite issuance and redemption.

Issuing an invite is an administrative action bounded three ways: the
issuer must be an administrator, below the top tier they may only invite
into roles strictly beneath their own, and below the top tier they may
issue a fixed number of invites over their lifetime. Redemption is an
atomic compare-and-set on ``isUsed`` inside a store transaction.
"""

import logging
from dataclasses import replace
from datetime import timedelta
from typing import List, Optional, Sequence

from ....config.constants import AuditActions, AuditSeverity, Collections, Fields, InviteCheckReasons
from ....config.settings import AccessSettings
from ....core.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    ConflictError,
    DocumentExistsError,
    EscalationError,
    InviteExpiredError,
    InviteNotFoundError,
    InviteRevokedError,
    RateLimitError,
    TenantIsolationError,
    ValidationError,
)
from ....core.shared.context import ActorContext
from ....store.protocols import DocumentStore, Query, StoreTransaction
from ....utils.datetime import Clock, to_iso, utc_now
from ...audit.services.audit_logger import AuditLogger
from ...roles.entities.role import RoleLike
from ...roles.services.role_model import RoleModel
from ...tenancy.services.scope_enforcer import TenantScopeEnforcer
from ...users.services.user_directory import UserDirectory
from ..entities.invite import InviteCheck, InviteCode
from ..utils.code_generator import InviteCodeGenerator, normalize_code

logger = logging.getLogger(__name__)


class InviteService:
    """Creates, checks, consumes, lists and revokes invite codes."""

    def __init__(
        self,
        store: DocumentStore,
        role_model: RoleModel,
        audit: AuditLogger,
        users: UserDirectory,
        settings: AccessSettings,
        enforcer: Optional[TenantScopeEnforcer] = None,
        code_generator: Optional[InviteCodeGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize with injected dependencies.

        Args:
            store: Document store holding the ``invites`` collection
            role_model: Role level comparisons
            audit: Audit logger for security-relevant failures
            users: Profile lookups used when a role claim is missing
            settings: Quota, code format and lifetime configuration
            enforcer: Tenant scope checks, built from ``role_model`` if omitted
            code_generator: Code source, built from settings if omitted
            clock: Source of timestamps
        """
        self._store = store
        self._role_model = role_model
        self._audit = audit
        self._users = users
        self._settings = settings
        self._enforcer = enforcer or TenantScopeEnforcer(role_model, store)
        self._generate = code_generator or InviteCodeGenerator(
            settings.invite_code_alphabet, settings.invite_code_length
        )
        self._clock = clock or utc_now

    async def create_invite(
        self,
        issuer: ActorContext,
        tenant_id: str,
        target_role: RoleLike,
        assigned_resource_ids: Sequence[str] = (),
    ) -> InviteCode:
        """Issue a new invite into ``tenant_id`` for ``target_role``.

        Raises:
            AuthorizationError: Issuer is below the administrator threshold
            EscalationError: Below the top tier, target role is not beneath the issuer
            TenantIsolationError: Below the top tier, tenant is not the issuer's own (audited)
            RateLimitError: Below the top tier, issuer has used their quota
            ConflictError: No free code found within the attempt budget
        """
        issuer = await self._users.hydrate(issuer)
        issuer_level = self._role_model.level_of(issuer.role)
        target_level = self._role_model.level_of(target_role)
        target_value = getattr(target_role, "value", target_role)

        if issuer_level < self._role_model.admin_threshold:
            await self._audit.record(
                issuer.actor_id,
                AuditActions.INVITE_UNAUTHORIZED,
                tenant_id,
                {"issuerLevel": issuer_level, "targetRole": target_value},
                AuditSeverity.WARNING,
            )
            raise AuthorizationError(
                "Only administrators can create invitations",
                details={"issuerLevel": issuer_level, "requiredLevel": self._role_model.admin_threshold},
            )

        if issuer_level < self._role_model.top_level:
            if target_level >= issuer_level:
                await self._audit.record(
                    issuer.actor_id,
                    AuditActions.INVITE_ESCALATION_ATTEMPT,
                    tenant_id,
                    {"issuerLevel": issuer_level, "targetLevel": target_level, "targetRole": target_value},
                    AuditSeverity.WARNING,
                )
                raise EscalationError(
                    "Cannot create invitations for a role equal to or above your own",
                    details={"issuerLevel": issuer_level, "targetLevel": target_level},
                )

            try:
                self._enforcer.require_write({Fields.TENANT_ID: tenant_id}, issuer)
            except TenantIsolationError:
                await self._audit.record(
                    issuer.actor_id,
                    AuditActions.INVITE_CROSS_TENANT_ATTEMPT,
                    tenant_id,
                    {"issuerTenantId": issuer.tenant_id, "targetRole": target_value},
                    AuditSeverity.WARNING,
                )
                raise

            # Best-effort: two concurrent requests may both pass at quota - 1.
            issued = await self._store.query(
                Query(Collections.INVITES).where(Fields.CREATED_BY, issuer.actor_id)
            )
            if len(issued) >= self._settings.invite_quota:
                raise RateLimitError(
                    f"Invite limit reached: at most {self._settings.invite_quota} invitations in total",
                    details={"issued": len(issued), "quota": self._settings.invite_quota},
                )

        now = self._clock()
        expires_at = None
        if self._settings.invite_ttl_days:
            expires_at = to_iso(now + timedelta(days=self._settings.invite_ttl_days))

        attempts = self._settings.invite_max_generation_attempts
        for attempt in range(1, attempts + 1):
            code = self._generate()
            if await self._store.get(Collections.INVITES, code) is not None:
                logger.debug(f"Invite code collision on attempt {attempt}")
                continue
            invite = InviteCode(
                code=code,
                created_by=issuer.actor_id,
                tenant_id=tenant_id,
                role=target_role,
                assigned_resource_ids=[str(r) for r in assigned_resource_ids],
                created_at=to_iso(now),
                expires_at=expires_at,
            )
            try:
                await self._store.create(Collections.INVITES, code, invite.to_document())
            except DocumentExistsError:
                logger.debug(f"Invite code taken concurrently on attempt {attempt}")
                continue
            logger.info(f"Invite created: {code} by {issuer.actor_id} for tenant {tenant_id}")
            return invite

        logger.error(f"Could not allocate a unique invite code after {attempts} attempts")
        raise ConflictError(
            "Could not generate a unique invite code",
            details={"attempts": attempts},
        )

    async def consume_invite(self, code: str, consumer_id: str) -> InviteCode:
        """Redeem ``code`` for ``consumer_id`` exactly once.

        Raises:
            ValidationError: No code given
            InviteNotFoundError: Code does not exist
            ConcurrencyError: Code was already consumed
            InviteRevokedError: Code was revoked
            InviteExpiredError: Code is past its lifetime
        """
        code = normalize_code(code)
        if not code:
            raise ValidationError("Invite code is required")
        if not consumer_id:
            raise ValidationError("Consumer id is required")
        now = self._clock()

        async def _consume(tx: StoreTransaction) -> InviteCode:
            document = await tx.get(Collections.INVITES, code)
            if document is None:
                raise InviteNotFoundError(f"Invite code {code} not found")
            invite = InviteCode.from_document(document)
            if invite.is_used:
                raise ConcurrencyError(
                    "Invite code has already been used",
                    details={"code": code},
                )
            if invite.revoked:
                raise InviteRevokedError("Invite code has been revoked", details={"code": code})
            if invite.is_expired(now):
                raise InviteExpiredError(
                    "Invite code has expired",
                    details={"code": code, "expiresAt": invite.expires_at},
                )
            used_at = to_iso(now)
            await tx.update(
                Collections.INVITES,
                code,
                {"isUsed": True, "usedAt": used_at, "usedBy": consumer_id},
            )
            return replace(invite, is_used=True, used_at=used_at, used_by=consumer_id)

        invite = await self._store.run_transaction(_consume)
        await self._audit.record(
            consumer_id,
            AuditActions.INVITE_CONSUMED,
            invite.tenant_id,
            {"code": code, "role": invite.role, "createdBy": invite.created_by},
            AuditSeverity.NOTICE,
        )
        logger.info(f"Invite {code} consumed by {consumer_id}")
        return invite

    async def check_invite(self, code: Optional[str]) -> InviteCheck:
        """Validate a code without consuming it."""
        code = normalize_code(code)
        if not code:
            return InviteCheck(False, InviteCheckReasons.MISSING_CODE)
        document = await self._store.get(Collections.INVITES, code)
        if document is None:
            return InviteCheck(False, InviteCheckReasons.NOT_FOUND)
        invite = InviteCode.from_document(document)
        if invite.is_used:
            return InviteCheck(False, InviteCheckReasons.ALREADY_USED)
        if invite.revoked:
            return InviteCheck(False, InviteCheckReasons.REVOKED)
        if invite.is_expired(self._clock()):
            return InviteCheck(False, InviteCheckReasons.EXPIRED)
        return InviteCheck(True, tenant_id=invite.tenant_id)

    async def list_invites(self, actor: ActorContext) -> List[InviteCode]:
        """Invites visible to an administrator, oldest first."""
        actor = await self._require_admin(actor)
        documents = await self._enforcer.fetch(actor, Collections.INVITES)
        invites = [InviteCode.from_document(document) for document in documents]
        return sorted(invites, key=lambda invite: invite.created_at or "")

    async def revoke_invite(self, actor: ActorContext, code: str) -> InviteCode:
        """Revoke an unused invite.

        The record is kept so it still counts towards the issuer's quota.

        Raises:
            AuthorizationError: Actor is not an administrator
            TenantIsolationError: Invite belongs to another tenant
            InviteNotFoundError: Code does not exist
            ConflictError: Invite was already used or revoked
        """
        actor = await self._require_admin(actor)
        code = normalize_code(code)
        document = await self._enforcer.get(actor, Collections.INVITES, code)
        if document is None:
            raise InviteNotFoundError(f"Invite code {code} not found")
        invite = InviteCode.from_document(document)
        if invite.is_used or invite.revoked:
            raise ConflictError(
                "Only unused invites can be revoked",
                details={"code": code, "isUsed": invite.is_used, "revoked": invite.revoked},
            )
        revoked_at = to_iso(self._clock())
        await self._enforcer.write(
            actor,
            Collections.INVITES,
            code,
            {"revoked": True, "revokedAt": revoked_at, "revokedBy": actor.actor_id},
            merge=True,
        )
        await self._audit.record(
            actor.actor_id,
            AuditActions.INVITE_REVOKED,
            invite.tenant_id,
            {"code": code, "createdBy": invite.created_by},
            AuditSeverity.WARNING,
        )
        logger.info(f"Invite {code} revoked by {actor.actor_id}")
        return replace(invite, revoked=True, revoked_at=revoked_at, revoked_by=actor.actor_id)

    async def _require_admin(self, actor: ActorContext) -> ActorContext:
        actor = await self._users.hydrate(actor)
        if not self._role_model.is_admin(actor.role):
            raise AuthorizationError(
                "Only administrators can manage invitations",
                details={"level": self._role_model.level_of(actor.role)},
            )
        return actor
