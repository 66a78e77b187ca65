"""
Lot selection — which lots an order line may draw from, and how much.

Read-only; no locking. Results are advisory: submit_pick recomputes the
remaining quantity inside its own transaction.
"""

from dataclasses import dataclass

from django.db.models import Sum
from django.db.models.functions import Coalesce

from lotman.models.enums import OrderStatus
from lotman.models.lot import InventoryLot
from lotman.models.pick import OrderPick
from lotman.services.lookup import fetch, pk_of


@dataclass(frozen=True)
class SelectableLot:
    """A candidate lot and the quantity not yet committed to open orders."""

    lot: InventoryLot
    remaining: int


def committed_quantity(lot) -> int:
    """Sum of picks from the lot whose order has not shipped."""
    return OrderPick.objects.filter(
        inventory_lot_id=pk_of(lot),
    ).exclude(
        order_item__order__status=OrderStatus.SHIPPED,
    ).aggregate(
        t=Coalesce(Sum('quantity_picked'), 0)
    )['t']


def remaining_in(lot: InventoryLot) -> int:
    """Remaining quantity of a row the caller has just loaded."""
    return max(0, lot.quantity_current - committed_quantity(lot))


class LotSelection:
    """Allocation selector methods."""

    @classmethod
    def remaining_quantity(cls, lot) -> int:
        """
        Quantity of a lot still free for picking.

        remaining = max(0, quantity_current - picks of non-shipped orders)

        The row is always re-read; an instance only supplies its pk.
        """
        return remaining_in(fetch(InventoryLot, lot))

    @classmethod
    def selectable_lots(cls, product, order_item=None) -> list[SelectableLot]:
        """
        Candidate lots for an order line, oldest expiry first.

        Candidates are usable lots (RECEIVED, QC_PENDING, AVAILABLE) plus
        any lot allocated to this order item, restricted to lots with
        quantity left.

        Args:
            product: Product instance or pk
            order_item: OrderItem instance or pk (None = usable lots only)

        Returns:
            List of SelectableLot, FIFO-ordered. The order is a
            suggestion; any listed lot may be picked.
        """
        lots = (
            InventoryLot.objects
            .for_product(product)
            .effectively_available(order_item)
            .with_stock()
            .select_related('product')
            .fifo()
        )
        return [
            SelectableLot(lot=lot, remaining=remaining_in(lot))
            for lot in lots
        ]

    @classmethod
    def is_selectable(cls, lot, order_item) -> bool:
        """Is the lot in the candidate set of the order item?"""
        return (
            InventoryLot.objects
            .filter(pk=pk_of(lot))
            .effectively_available(order_item)
            .exists()
        )
