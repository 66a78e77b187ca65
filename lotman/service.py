"""
Ledger Service — The single public interface for lot and order operations.

Usage:
    from lotman import ledger, LedgerError

    lot = ledger.receive(100, strawberries, expiry_date=friday, origin_country='US')
    ledger.confirm_order(order)
    result = ledger.submit_pick(item, lot, 40, user=packer)
    result.order_status  # 'PICKING'
"""

from lotman.services import (
    ConversionEngine,
    LedgerQueries,
    LotSelection,
    LotStore,
    OrderLifecycle,
    PickLedger,
)


class Ledger(
    LotStore,
    LotSelection,
    PickLedger,
    OrderLifecycle,
    ConversionEngine,
    LedgerQueries,
):
    """
    Single interface for all ledger operations.

    Every state-changing method runs in one atomic transaction with row
    locks and raises LedgerError on any business-rule rejection, leaving
    nothing half-applied. See each method's docstring.
    """
