"""
Lotman configuration.

Usage in settings.py:
    LOTMAN = {
        "AUDIT_EMITTER": "lotman.adapters.logger.LoggingAuditEmitter",
        "LOT_NUMBER_PREFIX": "01",
        "LOT_NUMBER_DIGITS": 6,
        "EXPIRE_BATCH_SIZE": 200,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LotmanSettings:
    """Lotman configuration settings."""

    # Audit emitter backend (dotted path)
    AUDIT_EMITTER: str = "lotman.adapters.logger.LoggingAuditEmitter"

    # Generated lot numbers: prefix + zero-padded sequence (01000001)
    LOT_NUMBER_PREFIX: str = "01"
    LOT_NUMBER_DIGITS: int = 6

    # Batch size for expire_lots processing
    EXPIRE_BATCH_SIZE: int = 200


def get_lotman_settings() -> LotmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LOTMAN", {})
    return LotmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in LotmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_lotman_settings(), name)


lotman_settings = _LazySettings()
