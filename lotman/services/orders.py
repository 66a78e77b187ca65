"""
Order lifecycle — the externally requested transitions.

DRAFT → CONFIRMED (confirm or FIFO allocation) and READY_TO_SHIP → SHIPPED.
Everything in between is derived from picks by the pick ledger.
"""

import logging
from collections.abc import Iterable
from datetime import date

from django.db import transaction
from django.utils import timezone

from lotman.audit import emit
from lotman.exceptions import LedgerError
from lotman.models.catalog import Customer, Product
from lotman.models.enums import OrderStatus
from lotman.models.lot import InventoryLot
from lotman.models.order import Order, OrderAllocation, OrderItem
from lotman.protocols.audit import AuditAction, EntityType
from lotman.services.lookup import fetch
from lotman.services.picking import order_progress
from lotman.status import all_fully_picked

logger = logging.getLogger('lotman')


class OrderLifecycle:
    """Order creation, confirmation, allocation and shipping."""

    @classmethod
    def create_order(cls, customer, delivery_date: date,
                     items: Iterable[tuple], po_number: str = '', user=None) -> Order:
        """
        Create a DRAFT order.

        Args:
            customer: Customer instance or pk
            delivery_date: Requested delivery date
            items: (product, quantity) pairs, one order line each
            po_number: Customer PO reference
            user: Creator

        Raises:
            LedgerError('INVALID_QUANTITY'): No items, or a quantity <= 0
        """
        items = list(items)
        if not items:
            raise LedgerError('INVALID_QUANTITY', "An order needs at least one item")
        for _product, quantity in items:
            if quantity <= 0:
                raise LedgerError('INVALID_QUANTITY', requested=quantity)

        with transaction.atomic():
            customer = fetch(Customer, customer)
            order = Order.objects.create(
                customer=customer,
                delivery_date=delivery_date,
                po_number=po_number or '',
                created_by=user,
            )
            for product, quantity in items:
                OrderItem.objects.create(
                    order=order,
                    product=fetch(Product, product),
                    quantity_ordered=quantity,
                )

            emit(user, AuditAction.CREATE, EntityType.ORDER, order.pk, {
                'customer_name': customer.name,
                'po_number': order.po_number or None,
                'delivery_date': delivery_date.isoformat(),
                'item_count': len(items),
            })
            logger.info(
                "order.create",
                extra={"order_id": order.pk, "customer": customer.code, "items": len(items)},
            )
            return order

    @classmethod
    def confirm_order(cls, order, user=None) -> Order:
        """
        DRAFT → CONFIRMED without allocations.

        Raises:
            LedgerError('INVALID_ORDER_STATE'): If the order is not DRAFT
        """
        with transaction.atomic():
            order = fetch(Order, order, lock=True)
            cls._require_status(order, OrderStatus.DRAFT)

            order.status = OrderStatus.CONFIRMED
            order.save(update_fields=['status', 'updated_at'])

            emit(user, AuditAction.CONFIRM, EntityType.ORDER, order.pk, {
                'po_number': order.po_number or None,
            })
            logger.info("order.confirm", extra={"order_id": order.pk})
            return order

    @classmethod
    def allocate_order(cls, order, user=None) -> list[OrderAllocation]:
        """
        Reserve lots for every line, oldest expiry first, and confirm.

        Each line walks the usable lots of its product with quantity left,
        reserving min(still needed, quantity_current) per lot until the
        ordered quantity is covered.

        Returns:
            Created allocations

        Raises:
            LedgerError('INVALID_ORDER_STATE'): Not DRAFT, or already allocated
            LedgerError('INSUFFICIENT_INVENTORY'): A line cannot be covered;
                nothing is reserved
        """
        with transaction.atomic():
            order = fetch(Order, order, lock=True, related=('customer',))
            cls._require_status(order, OrderStatus.DRAFT)

            if OrderAllocation.objects.filter(order_item__order=order).exists():
                raise LedgerError(
                    'INVALID_ORDER_STATE',
                    "Order already has allocations",
                    current=order.status,
                )

            allocations = []
            for item in order.items.select_related('product'):
                needed = item.quantity_ordered
                lots = (
                    InventoryLot.objects
                    .for_product(item.product_id)
                    .usable()
                    .with_stock()
                    .fifo()
                )
                for lot in lots:
                    if needed <= 0:
                        break
                    take = min(needed, lot.quantity_current)
                    allocations.append(OrderAllocation.objects.create(
                        order_item=item,
                        inventory_lot=lot,
                        quantity_allocated=take,
                    ))
                    needed -= take

                if needed > 0:
                    raise LedgerError(
                        'INSUFFICIENT_INVENTORY',
                        f"Insufficient inventory for {item.product.name} ({item.product.sku})",
                        available=item.quantity_ordered - needed,
                        requested=item.quantity_ordered,
                        product_id=item.product_id,
                    )

            order.status = OrderStatus.CONFIRMED
            order.save(update_fields=['status', 'updated_at'])

            emit(user, AuditAction.ALLOCATE, EntityType.ORDER, order.pk, {
                'summary': f"Allocated order {order.reference} using FIFO",
                'customer_name': order.customer.name,
                'allocation_count': len(allocations),
            })
            logger.info(
                "order.allocate",
                extra={"order_id": order.pk, "allocations": len(allocations)},
            )
            return allocations

    @classmethod
    def finalize_order(cls, order, user=None) -> Order:
        """
        READY_TO_SHIP → SHIPPED (terminal).

        Completeness is re-checked from the picks, not trusted from the
        stored status.

        Raises:
            LedgerError('INVALID_ORDER_STATE'): Not READY_TO_SHIP, or a line
                is not fully picked

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the order, so no pick or revert interleaves
        """
        with transaction.atomic():
            order = fetch(Order, order, lock=True, related=('customer',))
            cls._require_status(order, OrderStatus.READY_TO_SHIP)

            if not all_fully_picked(order_progress(order)):
                raise LedgerError(
                    'INVALID_ORDER_STATE',
                    "Not every item is fully picked",
                    current=order.status,
                )

            order.status = OrderStatus.SHIPPED
            order.shipped_at = timezone.now()
            order.save(update_fields=['status', 'shipped_at', 'updated_at'])

            emit(user, AuditAction.SHIP, EntityType.ORDER, order.pk, {
                'customer_name': order.customer.name,
                'po_number': order.po_number or None,
                'shipped_at': order.shipped_at.isoformat(),
            })
            logger.info("order.ship", extra={"order_id": order.pk})
            return order

    @staticmethod
    def _require_status(order: Order, expected: str) -> None:
        if order.status != expected:
            raise LedgerError(
                'INVALID_ORDER_STATE',
                f"Order is {order.status}, expected {expected}",
                current=order.status,
                expected=[expected],
            )
