"""
Lotman Adapters.

Implementations of protocols for external systems.
"""

from lotman.adapters.emitter import get_audit_emitter, reset_audit_emitter
from lotman.adapters.logger import LoggingAuditEmitter
from lotman.adapters.noop import NoopAuditEmitter

__all__ = [
    "get_audit_emitter",
    "reset_audit_emitter",
    "LoggingAuditEmitter",
    "NoopAuditEmitter",
]
