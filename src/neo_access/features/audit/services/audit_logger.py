"""Audit logging service.

Builds immutable ``AuditLogEntry`` records and delivers them to every
configured sink. Reportable entries are delivered at least once: a sink that
keeps failing after the configured attempts gets the entry queued. The queue
is retried for a sink as soon as it accepts a new entry, and by ``flush()``.
Non-reportable entries are best-effort.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ....config.constants import AuditActions, AuditSeverity
from ....utils.datetime import Clock, to_iso, utc_now
from ..entities.audit_entry import AuditLogEntry
from ..entities.protocols import AuditSink

logger = logging.getLogger(__name__)


# Log-based alert rule for external monitoring. Equivalent to AuditLogger.is_alert.
AUDIT_ALERT_FILTER = """
logger="neo_access.audit"
jsonPayload.reportable=true
jsonPayload.severity="CRITICAL"
"""


class AuditLogger:
    """Records security-relevant actions."""

    def __init__(
        self,
        sinks: Sequence[AuditSink],
        delivery_attempts: int = 3,
        clock: Optional[Clock] = None,
        max_pending: int = 1000,
    ):
        """Initialize the audit logger.

        Args:
            sinks: Destinations every entry is delivered to
            delivery_attempts: Attempts per sink before an entry is queued
            clock: Source of entry timestamps
            max_pending: Queue size above which the oldest entries are dropped
        """
        if delivery_attempts < 1:
            raise ValueError("delivery_attempts must be at least 1")
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self._sinks = list(sinks)
        self._delivery_attempts = delivery_attempts
        self._clock = clock or utc_now
        self._max_pending = max_pending
        self._pending: List[Tuple[AuditSink, AuditLogEntry]] = []

    @property
    def pending(self) -> List[AuditLogEntry]:
        """Reportable entries still waiting for delivery."""
        return [entry for _, entry in self._pending]

    @staticmethod
    def is_alert(entry: AuditLogEntry) -> bool:
        """Alert predicate: reportable CRITICAL entries."""
        return entry.is_alert

    async def record(
        self,
        actor_id: str,
        action: str,
        tenant_id: Optional[str],
        details: Optional[Dict[str, Any]] = None,
        severity: AuditSeverity = AuditSeverity.NOTICE,
        reportable: bool = True,
        message: Optional[str] = None,
    ) -> AuditLogEntry:
        """Build an entry and deliver it to every sink.

        Never raises for sink failures: reportable entries are queued and
        everything else is logged and dropped.
        """
        entry = AuditLogEntry(
            severity=severity,
            action=action,
            actor_id=actor_id,
            tenant_id=tenant_id,
            timestamp=to_iso(self._clock()),
            details=details or {},
            reportable=reportable,
            message=message or "",
        )
        recovered = []
        for sink in self._sinks:
            if await self._deliver(sink, entry):
                recovered.append(sink)
                continue
            if entry.reportable:
                logger.error(f"Queued audit entry {entry.entry_id} ({entry.action}) for redelivery")
                self._enqueue(sink, entry)
            else:
                logger.warning(f"Dropped non-reportable audit entry {entry.entry_id} ({entry.action})")
        if self._pending and recovered:
            await self._redeliver(recovered)
        return entry

    async def flush(self) -> int:
        """Retry queued entries. Returns how many are still pending."""
        queued, self._pending = self._pending, []
        for sink, entry in queued:
            if not await self._deliver(sink, entry):
                self._pending.append((sink, entry))
        if self._pending:
            logger.error(f"{len(self._pending)} audit entries still pending after flush")
        return len(self._pending)

    async def _deliver(self, sink: AuditSink, entry: AuditLogEntry) -> bool:
        for attempt in range(1, self._delivery_attempts + 1):
            try:
                await sink.emit(entry)
                return True
            except Exception as e:
                logger.warning(
                    f"Audit sink {type(sink).__name__} failed for {entry.action} "
                    f"(attempt {attempt}/{self._delivery_attempts}): {e}"
                )
        return False

    def _enqueue(self, sink: AuditSink, entry: AuditLogEntry) -> None:
        if len(self._pending) >= self._max_pending:
            _, dropped = self._pending.pop(0)
            logger.critical(
                f"Audit redelivery queue full ({self._max_pending}), "
                f"dropped entry {dropped.entry_id} ({dropped.action})"
            )
        self._pending.append((sink, entry))

    async def _redeliver(self, recovered: Sequence[AuditSink]) -> None:
        """Retry queued entries of sinks that just accepted a new entry."""
        queued, self._pending = self._pending, []
        for sink, entry in queued:
            if any(sink is ok for ok in recovered) and await self._deliver(sink, entry):
                logger.info(f"Redelivered audit entry {entry.entry_id} ({entry.action})")
                continue
            self._pending.append((sink, entry))

    # Data access helpers

    async def record_data_access(
        self, actor_id: str, collection: str, document_id: str, tenant_id: Optional[str]
    ) -> AuditLogEntry:
        """Record a read of sensitive data."""
        return await self.record(
            actor_id,
            AuditActions.DATA_ACCESS,
            tenant_id,
            {"collection": collection, "documentId": document_id},
            AuditSeverity.NOTICE,
        )

    async def record_data_modification(
        self,
        actor_id: str,
        collection: str,
        document_id: str,
        tenant_id: Optional[str],
        changed_fields: Sequence[str],
    ) -> AuditLogEntry:
        """Record a change to sensitive data."""
        return await self.record(
            actor_id,
            AuditActions.DATA_MODIFICATION,
            tenant_id,
            {"collection": collection, "documentId": document_id, "changedFields": list(changed_fields)},
            AuditSeverity.WARNING,
        )

    async def record_data_deletion(
        self, actor_id: str, collection: str, document_id: str, tenant_id: Optional[str]
    ) -> AuditLogEntry:
        """Record a deletion of sensitive data."""
        return await self.record(
            actor_id,
            AuditActions.DATA_DELETION,
            tenant_id,
            {"collection": collection, "documentId": document_id},
            AuditSeverity.CRITICAL,
        )
