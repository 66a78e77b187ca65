"""
Tests for the order lifecycle: create, confirm, allocate, finalize.
"""

from datetime import timedelta

import pytest

from lotman import LedgerError, ledger
from lotman.models import LotStatus, Order, OrderAllocation, OrderStatus


pytestmark = pytest.mark.django_db


class TestCreateOrder:
    """Tests for ledger.create_order()."""

    def test_creates_draft_with_items(self, customer, product, other_product, user, today):
        order = ledger.create_order(
            customer, today + timedelta(days=1),
            [(product, 10), (other_product.pk, 4)],
            po_number='PO-77',
            user=user,
        )

        assert order.status == OrderStatus.DRAFT
        assert order.po_number == 'PO-77'
        assert order.created_by == user
        assert [(i.product, i.quantity_ordered) for i in order.items.order_by('pk')] == [
            (product, 10),
            (other_product, 4),
        ]

    def test_empty_items_rejected(self, customer, today):
        with pytest.raises(LedgerError) as exc:
            ledger.create_order(customer, today, [])

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not Order.objects.exists()

    def test_non_positive_quantity_rejected(self, customer, product, today):
        with pytest.raises(LedgerError) as exc:
            ledger.create_order(customer, today, [(product, 0)])

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_unknown_customer(self, product, today):
        with pytest.raises(LedgerError) as exc:
            ledger.create_order(31337, today, [(product, 1)])

        assert exc.value.code == 'NOT_FOUND'


class TestConfirmOrder:
    """Tests for ledger.confirm_order()."""

    def test_draft_to_confirmed(self, make_order, audit, django_capture_on_commit_callbacks):
        order = make_order(status=OrderStatus.DRAFT)

        with django_capture_on_commit_callbacks(execute=True):
            order = ledger.confirm_order(order)

        assert order.status == OrderStatus.CONFIRMED
        assert audit.actions() == ['CONFIRM']

    def test_only_from_draft(self, order):
        with pytest.raises(LedgerError) as exc:
            ledger.confirm_order(order)

        assert exc.value.code == 'INVALID_ORDER_STATE'


class TestAllocateOrder:
    """Tests for ledger.allocate_order()."""

    def test_fifo_allocation(self, make_lot, make_order, product):
        late = make_lot(50, expires_in=20)
        early = make_lot(30, expires_in=4)
        make_lot(100, expires_in=1, status=LotStatus.EXPIRED)
        order = make_order((product, 45), status=OrderStatus.DRAFT)

        allocations = ledger.allocate_order(order)

        assert [(a.inventory_lot, a.quantity_allocated) for a in allocations] == [
            (early, 30),
            (late, 15),
        ]
        order.refresh_from_db()
        assert order.status == OrderStatus.CONFIRMED

    def test_insufficient_inventory_rolls_back(self, make_lot, make_order, product, other_product):
        make_lot(100)
        make_lot(3, lot_product=other_product)
        order = make_order((product, 10), (other_product, 5), status=OrderStatus.DRAFT)

        with pytest.raises(LedgerError) as exc:
            ledger.allocate_order(order)

        assert exc.value.code == 'INSUFFICIENT_INVENTORY'
        assert exc.value.available == 3
        assert exc.value.requested == 5
        assert not OrderAllocation.objects.exists()
        order.refresh_from_db()
        assert order.status == OrderStatus.DRAFT

    def test_only_from_draft(self, order, lot):
        with pytest.raises(LedgerError) as exc:
            ledger.allocate_order(order)

        assert exc.value.code == 'INVALID_ORDER_STATE'

    def test_already_allocated(self, make_order, product, lot):
        order = make_order((product, 5), status=OrderStatus.DRAFT)
        OrderAllocation.objects.create(
            order_item=order.items.get(), inventory_lot=lot, quantity_allocated=5,
        )

        with pytest.raises(LedgerError) as exc:
            ledger.allocate_order(order)

        assert exc.value.code == 'INVALID_ORDER_STATE'

    def test_allocation_does_not_move_quantity(self, make_order, product, lot):
        ledger.allocate_order(make_order((product, 5), status=OrderStatus.DRAFT))

        lot.refresh_from_db()
        assert lot.quantity_current == 100


class TestFinalizeOrder:
    """Tests for ledger.finalize_order()."""

    def test_two_item_order_ships_once(self, make_lot, make_order, product, other_product,
                                       audit, django_capture_on_commit_callbacks):
        """Fully picked → READY_TO_SHIP → SHIPPED; a second finalize fails."""
        straw = make_lot(100)
        blue = make_lot(100, lot_product=other_product)
        order = make_order((product, 10), (other_product, 5))
        straw_item, blue_item = order.items.order_by('pk')
        ledger.submit_pick(straw_item, straw, 10)
        ledger.submit_pick(blue_item, blue, 5)
        order.refresh_from_db()
        assert order.status == OrderStatus.READY_TO_SHIP

        with django_capture_on_commit_callbacks(execute=True):
            shipped = ledger.finalize_order(order)

        assert shipped.status == OrderStatus.SHIPPED
        assert shipped.shipped_at is not None
        assert audit.actions() == ['SHIP']

        with pytest.raises(LedgerError) as exc:
            ledger.finalize_order(order)
        assert exc.value.code == 'INVALID_ORDER_STATE'

    def test_not_ready(self, order):
        with pytest.raises(LedgerError) as exc:
            ledger.finalize_order(order)

        assert exc.value.code == 'INVALID_ORDER_STATE'

    def test_stale_ready_status_rechecked(self, make_order, product):
        """A READY_TO_SHIP status without the picks behind it is refused."""
        order = make_order((product, 5), status=OrderStatus.READY_TO_SHIP)

        with pytest.raises(LedgerError) as exc:
            ledger.finalize_order(order)

        assert exc.value.code == 'INVALID_ORDER_STATE'
        order.refresh_from_db()
        assert order.status == OrderStatus.READY_TO_SHIP

    def test_shipping_keeps_lot_quantity(self, lot, item, order):
        """Shipped consumption stays retired from quantity_current."""
        ledger.submit_pick(item, lot, 10)
        ledger.finalize_order(order)

        lot.refresh_from_db()
        assert lot.quantity_current == 90
