"""
Audit Emitter Protocol — interface for the audit trail.

Lotman reports every mutation through this protocol; persisting the
trail (database table, event bus, SIEM) belongs to the implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class AuditAction(str, Enum):
    """What happened."""

    RECEIVE = "RECEIVE"
    PICK = "PICK"
    UNPICK = "UNPICK"
    SHIP = "SHIP"
    ADJUST_QTY = "ADJUST_QTY"
    CONVERT_LOT = "CONVERT_LOT"
    ALLOCATE = "ALLOCATE"
    CONFIRM = "CONFIRM"
    CREATE = "CREATE"
    STATUS_CHANGE = "STATUS_CHANGE"
    EXPIRE = "EXPIRE"


class EntityType(str, Enum):
    """What it happened to."""

    LOT = "LOT"
    ORDER = "ORDER"


@dataclass(frozen=True)
class AuditEvent:
    """One audit trail entry, as handed to emitters."""

    actor_id: Any
    action: str
    entity_type: str
    entity_id: Any
    details: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime | None = None


@runtime_checkable
class AuditEmitter(Protocol):
    """
    Protocol for audit emission.

    Fire-and-forget: the ledger ignores the return value and a raising
    emitter never undoes the operation it reports.
    """

    def record(
        self,
        actor_id: Any,
        action: str,
        entity_type: str,
        entity_id: Any,
        details: dict[str, Any],
    ) -> None:
        """
        Record one event.

        Args:
            actor_id: Primary key of the acting user (None for system jobs)
            action: AuditAction value
            entity_type: EntityType value
            entity_id: Primary key of the entity
            details: JSON-serialisable context (quantities, lot numbers, ...)
        """
        ...
