"""Tenant data isolation.

Every tenant-scoped read and write passes through ``TenantScopeEnforcer``.
Actors below the top tier only ever see and touch documents of their own
home tenant, whatever filters or payloads they supply. Top-tier actors see
across tenants unless the request carries an ``acting_as_tenant_id``, in
which case that tenant is enforced for them too.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ....config.constants import Fields
from ....core.exceptions import ConfigurationError, TenantIsolationError
from ....core.shared.context import ActorContext
from ....store.protocols import Document, DocumentStore, Filter, Query
from ...roles.services.role_model import RoleModel

logger = logging.getLogger(__name__)


def _same_tenant(a: Any, b: Any) -> bool:
    return a is not None and b is not None and str(a) == str(b)


class TenantScopeEnforcer:
    """Injects tenant filters into queries and checks write payloads."""

    def __init__(
        self,
        role_model: RoleModel,
        store: Optional[DocumentStore] = None,
        tenant_field: str = Fields.TENANT_ID,
    ):
        self._role_model = role_model
        self._store = store
        self.tenant_field = tenant_field

    def _required_tenant(self, actor: ActorContext) -> Optional[str]:
        """Tenant that must be enforced for ``actor``, or None for unrestricted access."""
        if self._role_model.is_top_tier(actor.role):
            return actor.acting_as_tenant_id
        if not actor.tenant_id:
            raise TenantIsolationError(
                "Actor has no tenant assigned",
                details={"actorId": actor.actor_id},
            )
        return actor.tenant_id

    def scoped_query(
        self,
        collection: str,
        actor: ActorContext,
        extra_filters: Sequence[Filter] = (),
        limit: Optional[int] = None,
    ) -> Query:
        """Build a query over ``collection`` restricted to the actor's tenant.

        Caller supplied filters on the tenant field are discarded whenever a
        tenant is enforced.

        Raises:
            TenantIsolationError: If a non-top-tier actor has no tenant
        """
        query = Query(collection, tuple(extra_filters), limit)
        tenant_id = self._required_tenant(actor)
        if tenant_id is None:
            return query
        if query.filters_on(self.tenant_field):
            logger.debug(f"Discarding caller tenant filter on {collection} for {actor.actor_id}")
        return query.without_field(self.tenant_field).where(self.tenant_field, tenant_id)

    def authorize_write(self, payload: Mapping[str, Any], actor: ActorContext) -> bool:
        """Check whether ``actor`` may write ``payload``.

        A missing payload tenant is rejected for non-top-tier actors, and
        for top-tier actors acting as a tenant.
        """
        if self._role_model.is_top_tier(actor.role):
            if actor.acting_as_tenant_id is None:
                return True
            return _same_tenant(payload.get(self.tenant_field), actor.acting_as_tenant_id)
        return _same_tenant(payload.get(self.tenant_field), actor.tenant_id)

    def require_write(self, payload: Mapping[str, Any], actor: ActorContext) -> None:
        """Raise unless ``authorize_write`` allows the payload."""
        if not self.authorize_write(payload, actor):
            logger.warning(
                f"Rejected cross-tenant write by {actor.actor_id}: payload tenant "
                f"{payload.get(self.tenant_field)!r}, actor tenant {actor.tenant_id!r}"
            )
            raise TenantIsolationError(
                "Write targets a tenant other than the actor's",
                details={"tenantId": payload.get(self.tenant_field)},
            )

    # Store routing

    def _require_store(self) -> DocumentStore:
        if self._store is None:
            raise ConfigurationError("TenantScopeEnforcer was built without a document store")
        return self._store

    def _check_document(self, document: Document, actor: ActorContext, collection: str) -> None:
        tenant_id = self._required_tenant(actor)
        if tenant_id is not None and not _same_tenant(document.get(self.tenant_field), tenant_id):
            raise TenantIsolationError(
                f"Document {collection}/{document.id} belongs to another tenant",
                details={"collection": collection, "id": document.id},
            )

    async def fetch(
        self,
        actor: ActorContext,
        collection: str,
        extra_filters: Sequence[Filter] = (),
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Run a scoped query."""
        return await self._require_store().query(self.scoped_query(collection, actor, extra_filters, limit))

    async def get(self, actor: ActorContext, collection: str, doc_id: str) -> Optional[Document]:
        """Get one document, refusing documents outside the actor's scope."""
        document = await self._require_store().get(collection, doc_id)
        if document is not None:
            self._check_document(document, actor, collection)
        return document

    async def write(
        self,
        actor: ActorContext,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False,
    ) -> Document:
        """Create, replace or merge a document after tenant checks.

        Both the payload and any existing document must be in scope.
        """
        store = self._require_store()
        existing = await store.get(collection, doc_id)
        if existing is not None:
            self._check_document(existing, actor, collection)
        if merge and existing is not None:
            payload = {**existing.data, **data}
        else:
            payload = dict(data)
        self.require_write(payload, actor)
        if merge and existing is not None:
            return await store.update(collection, doc_id, data)
        return await store.set(collection, doc_id, payload)

    async def delete(self, actor: ActorContext, collection: str, doc_id: str) -> bool:
        """Delete a document after tenant checks. Missing documents are a no-op."""
        store = self._require_store()
        existing = await store.get(collection, doc_id)
        if existing is None:
            return False
        self._check_document(existing, actor, collection)
        return await store.delete(collection, doc_id)
