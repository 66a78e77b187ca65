"""
Noop Audit Emitter — stub adapter for development and testing.

Usage in settings.py:
    LOTMAN = {
        "AUDIT_EMITTER": "lotman.adapters.noop.NoopAuditEmitter",
    }

WARNING: Do NOT use in production. Every event is dropped.
"""

from __future__ import annotations

from typing import Any


class NoopAuditEmitter:
    """
    No-operation audit emitter.

    Implements the ``AuditEmitter`` protocol and discards everything.
    Suitable for local development and tests that don't inspect the trail.
    """

    def record(
        self,
        actor_id: Any,
        action: str,
        entity_type: str,
        entity_id: Any,
        details: dict[str, Any],
    ) -> None:
        return None
