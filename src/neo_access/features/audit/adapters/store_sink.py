"""Audit sink persisting entries to the document store."""

from ....config.constants import Collections
from ....store.protocols import DocumentStore
from ..entities.audit_entry import AuditLogEntry


class StoreAuditSink:
    """Appends entries to the ``audit_logs`` collection.

    Uses insert-if-absent so a redelivered entry never overwrites the
    original.
    """

    def __init__(self, store: DocumentStore, collection: str = Collections.AUDIT_LOGS):
        self._store = store
        self._collection = collection

    async def emit(self, entry: AuditLogEntry) -> None:
        existing = await self._store.get(self._collection, entry.entry_id)
        if existing is not None:
            return
        await self._store.create(self._collection, entry.entry_id, entry.to_dict())
