"""
Exceptions for Lotman.

All errors are LedgerError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Exception with a stable code, a readable message and context data.

    Subclasses provide `_default_messages` so callers only pass the code:

        raise LedgerError('OVER_PICK', remaining=5, requested=8)
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.data:
            return f"[{self.code}] {self.message}"
        context = ", ".join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.code}] {self.message} ({context})"


class LedgerError(BaseError):
    """
    Structured exception for lot ledger operations.

    Usage:
        try:
            ledger.submit_pick(item, lot, 120, user=user)
        except LedgerError as e:
            if e.code == 'INSUFFICIENT_LOT_QUANTITY':
                print(f"Only {e.available} left in lot")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_QUANTITY': 'Invalid quantity',
        'INSUFFICIENT_LOT_QUANTITY': 'Insufficient quantity remaining in lot',
        'INSUFFICIENT_QUANTITY': 'Insufficient quantity in source lot',
        'INSUFFICIENT_INVENTORY': 'Not enough inventory to allocate item',
        'OVER_PICK': 'Pick exceeds the quantity still to pick for this item',
        'LOT_NOT_AVAILABLE': 'Lot is not available for picking',
        'PRODUCT_MISMATCH': 'Lot does not match order item product',
        'INVALID_ORDER_STATE': 'Order status does not allow this operation',
        'INVALID_TRANSITION': 'Lot status transition not allowed',
        'MISSING_GTIN': 'Product is missing GTIN',
        'NOT_FOUND': 'Record not found',
        'REASON_REQUIRED': 'Reason is required',
        'NO_SOURCE_LOTS': 'At least one source lot is required',
        'DUPLICATE_SOURCE_LOT': 'Source lot listed more than once',
        'INVALID_LOT_NUMBER': 'Lot number can only contain letters, numbers and hyphens',
        'DUPLICATE_LOT_NUMBER': 'Lot number already exists',
    }

    @property
    def available(self) -> int | Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int | Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
