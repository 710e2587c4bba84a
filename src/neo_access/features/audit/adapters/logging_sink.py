"""Audit sink writing JSON lines to the audit logger."""

import json
import logging
from typing import Optional

from ....config.constants import AuditSeverity
from ....config.logging_config import AUDIT_LOGGER_NAME
from ..entities.audit_entry import AuditLogEntry


_LEVELS = {
    AuditSeverity.NOTICE: logging.INFO,
    AuditSeverity.WARNING: logging.WARNING,
    AuditSeverity.CRITICAL: logging.CRITICAL,
}


class LoggingAuditSink:
    """Emits one JSON document per entry on ``neo_access.audit``."""

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self._logger = audit_logger or logging.getLogger(AUDIT_LOGGER_NAME)

    async def emit(self, entry: AuditLogEntry) -> None:
        self._logger.log(_LEVELS[entry.severity], json.dumps(entry.to_dict(), default=str, sort_keys=True))
