"""
Ledger queries — read-only views for picking, conversion and recall.

No locking; the data may be slightly stale and is never used to
authorize a mutation.
"""

from dataclasses import dataclass, field

from lotman.exceptions import LedgerError
from lotman.models.lot import InventoryLot
from lotman.models.order import Order, OrderItem
from lotman.models.pick import OrderPick
from lotman.models.production import ProductionRun
from lotman.services.lookup import fetch
from lotman.services.selection import LotSelection, SelectableLot
from lotman.status import PICKABLE_ORDER_STATUSES


@dataclass(frozen=True)
class PickingLine:
    item: OrderItem
    quantity_picked: int
    lots: list[SelectableLot]

    @property
    def remaining_to_pick(self) -> int:
        return max(0, self.item.quantity_ordered - self.quantity_picked)


@dataclass(frozen=True)
class PickingSheet:
    order: Order
    lines: list[PickingLine]


@dataclass(frozen=True)
class LotTrace:
    """Lineage and outbound picks of one lot."""

    lot: InventoryLot
    parents: list[ProductionRun] = field(default_factory=list)
    children: list[ProductionRun] = field(default_factory=list)
    picks: list[OrderPick] = field(default_factory=list)


class LedgerQueries:
    """Read models."""

    @classmethod
    def order_for_picking(cls, order) -> PickingSheet:
        """
        Everything a picker needs for one order.

        Per line: picked so far and the selectable lots that still have
        remaining quantity, oldest expiry first.

        Raises:
            LedgerError('NOT_FOUND'): Order does not exist
            LedgerError('INVALID_ORDER_STATE'): Order is not pickable
        """
        order = fetch(Order, order, related=('customer',))
        if order.status not in PICKABLE_ORDER_STATUSES:
            raise LedgerError(
                'INVALID_ORDER_STATE',
                f"Order is {order.status} and cannot be picked",
                current=order.status,
                expected=list(PICKABLE_ORDER_STATUSES),
            )

        lines = []
        for item in order.items.select_related('product'):
            lots = [
                candidate
                for candidate in LotSelection.selectable_lots(item.product_id, item)
                if candidate.remaining > 0
            ]
            lines.append(PickingLine(item=item, quantity_picked=item.quantity_picked, lots=lots))
        return PickingSheet(order=order, lines=lines)

    @classmethod
    def lot_for_conversion(cls, lot_number: str) -> InventoryLot:
        """
        Look up a conversion source by lot number.

        Raises:
            LedgerError('NOT_FOUND'): No such lot
            LedgerError('INVALID_QUANTITY'): Lot is empty
            LedgerError('LOT_NOT_AVAILABLE'): Lot status is not usable
        """
        try:
            lot = InventoryLot.objects.select_related('product').get(lot_number=lot_number)
        except InventoryLot.DoesNotExist:
            raise LedgerError('NOT_FOUND', "Lot not found", lot_number=lot_number) from None

        if lot.quantity_current <= 0:
            raise LedgerError(
                'INVALID_QUANTITY',
                "Lot has no available quantity",
                available=lot.quantity_current,
            )
        if not lot.is_usable:
            raise LedgerError(
                'LOT_NOT_AVAILABLE',
                f"Lot is {lot.status} and cannot be used for conversion",
                current=lot.status,
            )
        return lot

    @classmethod
    def trace_lot(cls, lot) -> LotTrace:
        """
        Recall view of a lot.

        - parents: runs that produced this lot (this lot is the destination)
        - children: runs that consumed this lot (this lot is the source)
        - picks: shipments and open picks drawn from this lot
        """
        lot = fetch(InventoryLot, lot, related=('product', 'parent_lot'))
        parents = list(
            ProductionRun.objects
            .filter(destination_lot=lot)
            .select_related('source_lot__product')
        )
        children = list(
            ProductionRun.objects
            .filter(source_lot=lot)
            .select_related('destination_lot__product')
        )
        picks = list(
            OrderPick.objects
            .filter(inventory_lot=lot)
            .select_related('order_item__order__customer', 'order_item__product')
        )
        return LotTrace(lot=lot, parents=parents, children=children, picks=picks)
