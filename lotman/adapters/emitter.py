"""
Audit emitter loading — resolves the configured AuditEmitter.

Usage:
    from lotman.adapters import get_audit_emitter

    emitter = get_audit_emitter()
    emitter.record(user.pk, "PICK", "ORDER", order.pk, {...})

Settings:
    LOTMAN = {
        "AUDIT_EMITTER": "lotman.adapters.logger.LoggingAuditEmitter",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from lotman.conf import lotman_settings
from lotman.protocols.audit import AuditEmitter

logger = logging.getLogger(__name__)


# Cached emitter instance
_lock = threading.Lock()
_audit_emitter: AuditEmitter | None = None


def get_audit_emitter() -> AuditEmitter:
    """
    Return the configured audit emitter.

    Raises:
        ImproperlyConfigured: If AUDIT_EMITTER is empty or import fails
    """
    global _audit_emitter

    if _audit_emitter is None:
        with _lock:
            if _audit_emitter is None:  # double-checked
                emitter_path = lotman_settings.AUDIT_EMITTER

                if not emitter_path:
                    raise ImproperlyConfigured(
                        "LOTMAN['AUDIT_EMITTER'] must be configured. "
                        "Example: 'lotman.adapters.logger.LoggingAuditEmitter'"
                    )

                try:
                    emitter_class = import_string(emitter_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import audit emitter '{emitter_path}': {e}"
                    ) from e
                _audit_emitter = emitter_class()
                logger.debug("Loaded audit emitter: %s", emitter_path)

    return _audit_emitter


def reset_audit_emitter() -> None:
    """Reset the cached emitter. Useful for testing."""
    global _audit_emitter
    _audit_emitter = None
