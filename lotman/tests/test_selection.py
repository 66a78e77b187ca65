"""
Tests for lot selection: candidate set, FIFO order, remaining quantity.
"""

import pytest

from lotman import ledger
from lotman.models import LotStatus, OrderAllocation, OrderStatus


pytestmark = pytest.mark.django_db


class TestSelectableLots:
    """Tests for ledger.selectable_lots()."""

    def test_fifo_by_expiry(self, make_lot, product, item):
        late = make_lot(50, expires_in=20)
        early = make_lot(100, expires_in=5)

        lots = ledger.selectable_lots(product, item)

        assert [c.lot for c in lots] == [early, late]
        assert [c.remaining for c in lots] == [100, 50]

    def test_ties_by_creation_order(self, make_lot, product, item):
        first = make_lot(10, expires_in=5)
        second = make_lot(10, expires_in=5)

        assert [c.lot for c in ledger.selectable_lots(product, item)] == [first, second]

    def test_usable_statuses_only(self, make_lot, product, item):
        received = make_lot(status=LotStatus.RECEIVED)
        qc = make_lot(status=LotStatus.QC_PENDING)
        available = make_lot(status=LotStatus.AVAILABLE)
        make_lot(status=LotStatus.EXPIRED)
        make_lot(0, status=LotStatus.DEPLETED)

        lots = {c.lot for c in ledger.selectable_lots(product, item)}

        assert lots == {received, qc, available}

    def test_allocated_lot_stays_visible(self, make_lot, product, item):
        """A lot reserved for the item is selectable after drifting to EXPIRED."""
        reserved = make_lot(status=LotStatus.EXPIRED)
        make_lot(status=LotStatus.EXPIRED)
        OrderAllocation.objects.create(order_item=item, inventory_lot=reserved, quantity_allocated=10)

        lots = [c.lot for c in ledger.selectable_lots(product, item)]

        assert lots == [reserved]

    def test_allocation_for_other_item_ignored(self, make_lot, make_order, product, item):
        other_item = make_order((product, 5)).items.get()
        reserved = make_lot(status=LotStatus.EXPIRED)
        OrderAllocation.objects.create(order_item=other_item, inventory_lot=reserved, quantity_allocated=5)

        assert ledger.selectable_lots(product, item) == []

    def test_empty_lots_excluded(self, make_lot, product, item):
        make_lot(0, status=LotStatus.AVAILABLE)

        assert ledger.selectable_lots(product, item) == []

    def test_other_product_excluded(self, make_lot, other_product, product, item):
        make_lot(lot_product=other_product)

        assert ledger.selectable_lots(product, item) == []

    def test_no_duplicates_with_several_allocations(self, make_lot, product, item):
        """Union of both branches lists a lot once."""
        lot = make_lot()
        OrderAllocation.objects.create(order_item=item, inventory_lot=lot, quantity_allocated=4)
        OrderAllocation.objects.create(order_item=item, inventory_lot=lot, quantity_allocated=6)

        assert [c.lot for c in ledger.selectable_lots(product, item)] == [lot]


class TestRemainingQuantity:
    """Tests for ledger.remaining_quantity()."""

    def test_no_picks(self, lot):
        assert ledger.remaining_quantity(lot) == 100

    def test_subtracts_open_picks(self, lot, item):
        ledger.submit_pick(item, lot, 10)

        lot.refresh_from_db()
        # current 90 minus the 10 still committed to the open order
        assert ledger.remaining_quantity(lot) == 80

    def test_shipped_picks_not_subtracted(self, lot, item, order):
        ledger.submit_pick(item, lot, 10)
        ledger.finalize_order(order)

        lot.refresh_from_db()
        assert lot.quantity_current == 90
        assert ledger.remaining_quantity(lot) == 90

    def test_never_negative(self, lot, item):
        ledger.submit_pick(item, lot, 10)
        ledger.adjust_quantity(lot, 4, reason='Damage')

        assert ledger.remaining_quantity(lot.pk) == 0

    def test_order_status_filter(self, lot, make_order, product):
        """Only SHIPPED orders are excluded from the committed sum."""
        order = make_order((product, 5), status=OrderStatus.CONFIRMED)
        ledger.submit_pick(order.items.get(), lot, 5)
        order.refresh_from_db()
        assert order.status == OrderStatus.READY_TO_SHIP

        assert ledger.remaining_quantity(lot) == 90

    def test_stale_instance_reloaded(self, lot, item):
        """An out-of-date instance is re-read, not trusted."""
        ledger.adjust_quantity(lot.pk, 40, reason='Cycle count')
        ledger.submit_pick(item, lot.pk, 10)

        assert lot.quantity_current == 100
        assert ledger.remaining_quantity(lot) == 20
