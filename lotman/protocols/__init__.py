"""
Lotman Protocols.

Defines interfaces for external system integration.
"""

from lotman.protocols.audit import (
    AuditAction,
    AuditEmitter,
    AuditEvent,
    EntityType,
)

__all__ = [
    "AuditAction",
    "AuditEmitter",
    "AuditEvent",
    "EntityType",
]
