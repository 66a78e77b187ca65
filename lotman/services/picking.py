"""
Pick ledger — commits lot quantity to order lines and takes it back.

Lock order: the order row first, then the lot row. Reverting locks the
pick before both.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from lotman.exceptions import LedgerError
from lotman.models.enums import OrderStatus
from lotman.models.lot import InventoryLot
from lotman.models.order import Order, OrderItem
from lotman.models.pick import OrderPick
from lotman.protocols.audit import AuditAction, EntityType
from lotman.services.lookup import fetch
from lotman.services.lots import LotStore
from lotman.services.selection import LotSelection, remaining_in
from lotman.status import (
    PICKABLE_ORDER_STATUSES,
    ItemProgress,
    all_fully_picked,
    status_after_pick,
    status_after_revert,
)

logger = logging.getLogger('lotman')


@dataclass(frozen=True)
class PickResult:
    pick: OrderPick
    lot: InventoryLot
    order_status: str
    all_items_fully_picked: bool


@dataclass(frozen=True)
class RevertResult:
    lot: InventoryLot
    quantity_restored: int
    order_status: str


def order_progress(order) -> list[ItemProgress]:
    """Picking progress of every line of the order, from the stored picks."""
    items = OrderItem.objects.filter(order=order).annotate(
        picked=Coalesce(Sum('picks__quantity_picked'), 0)
    ).order_by('pk')
    return [ItemProgress(item.quantity_ordered, item.picked) for item in items]


def remaining_picks(order) -> tuple[dict[int, int], list[tuple[int, int]]]:
    """Ordered quantity per line and the order's picks, oldest first."""
    ordered = dict(
        OrderItem.objects.filter(order=order).values_list('pk', 'quantity_ordered')
    )
    picks = list(
        OrderPick.objects.filter(order_item__order=order)
        .order_by('picked_at', 'pk')
        .values_list('order_item_id', 'quantity_picked')
    )
    return ordered, picks


class PickLedger:
    """Pick and revert operations."""

    @classmethod
    def submit_pick(cls, order_item, lot, quantity: int, user=None) -> PickResult:
        """
        Record a pick of quantity units from lot for order_item.

        Checked in this order, inside the transaction:
        1. order is CONFIRMED, PICKING, PARTIAL_PICK or READY_TO_SHIP
        2. quantity > 0
        3. lot product == item product
        4. lot is usable or allocated to this item
        5. quantity <= ordered - already picked for the item
        6. quantity <= remaining quantity of the lot

        Effects: creates the OrderPick, draws the lot down, recomputes
        the order status.

        Args:
            order_item: OrderItem instance or pk
            lot: InventoryLot instance or pk
            quantity: Whole units to pick
            user: Picker

        Returns:
            PickResult with the new order status

        Raises:
            LedgerError('INVALID_ORDER_STATE'): Order not pickable
            LedgerError('INVALID_QUANTITY'): quantity <= 0
            LedgerError('PRODUCT_MISMATCH'): Lot is another product
            LedgerError('LOT_NOT_AVAILABLE'): Lot not selectable for the item
            LedgerError('OVER_PICK'): More than the item still needs
            LedgerError('INSUFFICIENT_LOT_QUANTITY'): More than the lot has left

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the order, then the lot, with select_for_update()
            - Concurrent picks on the same lot are serialized
        """
        with transaction.atomic():
            item = fetch(OrderItem, order_item, related=('product',))
            order = fetch(Order, item.order_id, lock=True, related=('customer',))

            if order.status not in PICKABLE_ORDER_STATUSES:
                raise LedgerError(
                    'INVALID_ORDER_STATE',
                    f"Cannot pick for an order in status {order.status}",
                    current=order.status,
                    expected=list(PICKABLE_ORDER_STATUSES),
                )

            if quantity <= 0:
                raise LedgerError('INVALID_QUANTITY', requested=quantity)

            locked_lot = fetch(InventoryLot, lot, lock=True, related=('product',))

            if locked_lot.product_id != item.product_id:
                raise LedgerError(
                    'PRODUCT_MISMATCH',
                    lot_product=locked_lot.product_id,
                    item_product=item.product_id,
                )

            if not LotSelection.is_selectable(locked_lot, item):
                raise LedgerError(
                    'LOT_NOT_AVAILABLE',
                    lot_number=locked_lot.lot_number,
                    current=locked_lot.status,
                )

            outstanding = item.quantity_ordered - item.quantity_picked
            if quantity > outstanding:
                raise LedgerError(
                    'OVER_PICK',
                    f"Only {max(0, outstanding)} left to pick for this item",
                    available=max(0, outstanding),
                    requested=quantity,
                )

            remaining = remaining_in(locked_lot)
            if quantity > remaining:
                raise LedgerError(
                    'INSUFFICIENT_LOT_QUANTITY',
                    f"Lot {locked_lot.lot_number} has only {remaining} remaining",
                    available=remaining,
                    requested=quantity,
                )

            first_pick = not OrderPick.objects.filter(order_item__order=order).exists()

            pick = OrderPick.objects.create(
                order_item=item,
                inventory_lot=locked_lot,
                quantity_picked=quantity,
                picked_by=user,
            )

            progress = order_progress(order)
            new_status = status_after_pick(order.status, progress, first_pick)
            complete = all_fully_picked(progress)

            update = LotStore.adjust_by(
                locked_lot, -quantity, user,
                action=AuditAction.PICK,
                entity=(EntityType.ORDER, order.pk),
                context={
                    'pick_id': pick.pk,
                    'order_item_id': item.pk,
                    'quantity': quantity,
                    'customer_name': order.customer.name,
                    'po_number': order.po_number or None,
                    'order_status': new_status,
                },
            )

            if new_status != order.status:
                order.status = new_status
                order.save(update_fields=['status', 'updated_at'])

            logger.info(
                "lot.pick",
                extra={
                    "order_id": order.pk,
                    "item_id": item.pk,
                    "lot_id": locked_lot.pk,
                    "qty": quantity,
                    "order_status": new_status,
                },
            )

            return PickResult(
                pick=pick,
                lot=update.lot,
                order_status=new_status,
                all_items_fully_picked=complete,
            )

    @classmethod
    def revert_pick(cls, pick, user=None) -> RevertResult:
        """
        Undo a pick: restore the lot quantity and step the order back.

        A DEPLETED or EXPIRED lot that gets quantity back becomes AVAILABLE.
        The order status is replayed from the picks that remain.

        Raises:
            LedgerError('NOT_FOUND'): Pick does not exist
            LedgerError('INVALID_ORDER_STATE'): Order already shipped

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the pick, the order, then the lot
        """
        with transaction.atomic():
            locked_pick = fetch(OrderPick, pick, lock=True, related=('order_item',))
            order = fetch(Order, locked_pick.order_item.order_id, lock=True)

            if order.status == OrderStatus.SHIPPED:
                raise LedgerError(
                    'INVALID_ORDER_STATE',
                    "Picks of a shipped order cannot be reverted",
                    current=order.status,
                )

            quantity = locked_pick.quantity_picked
            lot_id = locked_pick.inventory_lot_id
            OrderPick.objects.filter(pk=locked_pick.pk).delete()

            new_status = status_after_revert(*remaining_picks(order))

            update = LotStore.adjust_by(
                lot_id, quantity, user,
                action=AuditAction.UNPICK,
                context={
                    'order_id': order.pk,
                    'order_item_id': locked_pick.order_item_id,
                    'quantity_restored': quantity,
                    'reason': 'User Reverted Pick',
                    'order_status': new_status,
                },
            )

            if new_status != order.status:
                order.status = new_status
                order.save(update_fields=['status', 'updated_at'])

            logger.info(
                "lot.unpick",
                extra={
                    "order_id": order.pk,
                    "lot_id": lot_id,
                    "qty": quantity,
                    "order_status": new_status,
                },
            )

            return RevertResult(
                lot=update.lot,
                quantity_restored=quantity,
                order_status=new_status,
            )
