"""
Audit emission — reports ledger mutations to the configured emitter.

Events are queued with transaction.on_commit(): an operation that rolls
back reports nothing, and an emitter failure is logged, never raised.
"""

import logging
from functools import partial
from typing import Any

from django.db import transaction

from lotman.adapters.emitter import get_audit_emitter
from lotman.protocols.audit import AuditAction, EntityType

logger = logging.getLogger('lotman')


def actor_id(user) -> Any:
    """Primary key of the acting user, None for system jobs."""
    return getattr(user, 'pk', None)


def emit(user, action: AuditAction, entity_type: EntityType, entity_id, details: dict[str, Any]) -> None:
    """Queue an audit event for when the current transaction commits."""
    transaction.on_commit(partial(
        _dispatch,
        actor_id(user),
        action.value,
        entity_type.value,
        entity_id,
        details,
    ))


def _dispatch(actor, action, entity_type, entity_id, details) -> None:
    try:
        get_audit_emitter().record(actor, action, entity_type, entity_id, details)
    except Exception:
        logger.exception(
            "audit.emit_failed",
            extra={"action": action, "entity_type": entity_type, "entity_id": entity_id},
        )
