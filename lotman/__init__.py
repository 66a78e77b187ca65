"""
Django Lotman — lot ledger and order fulfillment.

Perishable goods arrive in traceable lots, are consumed by picks against
customer orders and can be repacked into new lots by production runs.

Usage:
    from lotman import ledger, LedgerError

    lot = ledger.receive(100, strawberries, expiry_date=friday, origin_country='US')
    ledger.submit_pick(order_item, lot, 40, user=packer)
    ledger.selectable_lots(strawberries, order_item)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from lotman.service import Ledger
        return Ledger
    elif name == 'LedgerError':
        from lotman.exceptions import LedgerError
        return LedgerError
    elif name == 'Product':
        from lotman.models.catalog import Product
        return Product
    elif name == 'Customer':
        from lotman.models.catalog import Customer
        return Customer
    elif name == 'InventoryLot':
        from lotman.models.lot import InventoryLot
        return InventoryLot
    elif name == 'Order':
        from lotman.models.order import Order
        return Order
    elif name == 'OrderItem':
        from lotman.models.order import OrderItem
        return OrderItem
    elif name == 'OrderAllocation':
        from lotman.models.order import OrderAllocation
        return OrderAllocation
    elif name == 'OrderPick':
        from lotman.models.pick import OrderPick
        return OrderPick
    elif name == 'ProductionRun':
        from lotman.models.production import ProductionRun
        return ProductionRun
    elif name == 'LotStatus':
        from lotman.models.enums import LotStatus
        return LotStatus
    elif name == 'OrderStatus':
        from lotman.models.enums import OrderStatus
        return OrderStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'Product',
    'Customer',
    'InventoryLot',
    'Order',
    'OrderItem',
    'OrderAllocation',
    'OrderPick',
    'ProductionRun',
    'LotStatus',
    'OrderStatus',
]

__version__ = '0.1.0'
