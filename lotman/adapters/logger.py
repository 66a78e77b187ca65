"""
Logging Audit Emitter — default adapter, writes the trail to a logger.

Every event becomes one INFO record on the ``lotman.audit`` logger, with
the event fields in ``extra`` so structured handlers can ship them.
"""

from __future__ import annotations

import logging
from typing import Any

audit_logger = logging.getLogger('lotman.audit')


class LoggingAuditEmitter:
    """Audit emitter backed by the standard logging module."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or audit_logger

    def record(
        self,
        actor_id: Any,
        action: str,
        entity_type: str,
        entity_id: Any,
        details: dict[str, Any],
    ) -> None:
        self.logger.info(
            "audit.%s",
            action.lower(),
            extra={
                "actor_id": actor_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "details": details,
            },
        )
