"""
Ledger services — modular organization of ledger operations.

Re-exports the operation groups that make up the facade:
    from lotman.services import LotStore, LotSelection, PickLedger, OrderLifecycle, ConversionEngine, LedgerQueries
"""

from lotman.services.conversion import ConversionEngine
from lotman.services.lots import LotStore
from lotman.services.orders import OrderLifecycle
from lotman.services.picking import PickLedger
from lotman.services.queries import LedgerQueries
from lotman.services.selection import LotSelection

__all__ = [
    'LotStore',
    'LotSelection',
    'PickLedger',
    'OrderLifecycle',
    'ConversionEngine',
    'LedgerQueries',
]
