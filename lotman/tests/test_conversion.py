"""
Tests for the conversion engine.
"""

from decimal import Decimal

import pytest

from lotman import LedgerError, ledger
from lotman.models import InventoryLot, LotStatus, ProductionRun
from lotman.services.conversion import proportional_split, to_quantity, whole_units


pytestmark = pytest.mark.django_db


class TestProportionalSplit:
    """Tests for proportional_split() (no database)."""

    def test_thirty_seventy(self):
        assert proportional_split([Decimal(30), Decimal(70)], Decimal(50)) == [Decimal(15), Decimal(35)]

    def test_sum_is_exact(self):
        """Shares add up to the produced quantity even when they do not divide evenly."""
        produced = Decimal('10')
        shares = proportional_split([Decimal(1), Decimal(1), Decimal(1)], produced)

        assert shares[:2] == [Decimal('3.333333'), Decimal('3.333333')]
        assert sum(shares) == produced

    def test_single_source_takes_all(self):
        assert proportional_split([Decimal('7.5')], Decimal('12')) == [Decimal('12')]

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            proportional_split([], Decimal(1))


class TestQuantityHelpers:

    def test_whole_units_round_half_up(self):
        assert whole_units(Decimal('2.5')) == 3
        assert whole_units(Decimal('2.49')) == 2

    def test_to_quantity_from_float(self):
        assert to_quantity(0.1) == Decimal('0.100000')


class TestConvertInventory:
    """Tests for ledger.convert_inventory()."""

    def test_creates_destination_lot(self, make_lot, repack_product, user):
        source = make_lot(40, expires_in=6, grower_id='G-9', origin_country='MX')

        result = ledger.convert_inventory(source, 10, repack_product, 24, user=user, notes='Clamshells')

        source.refresh_from_db()
        dest = result.destination_lot
        assert source.quantity_current == 30
        assert dest.status == LotStatus.RECEIVED
        assert dest.product == repack_product
        assert dest.parent_lot == source
        assert dest.original_quantity == dest.quantity_received == dest.quantity_current == 24
        assert dest.expiry_date == source.expiry_date
        assert (dest.origin_country, dest.grower_id) == ('MX', 'G-9')
        assert dest.lot_number == '01000001'

        run, = result.runs
        assert (run.source_lot, run.destination_lot) == (source, dest)
        assert run.quantity_consumed == Decimal(10)
        assert run.quantity_produced == Decimal(24)
        assert run.notes == 'Clamshells'
        assert run.user == user

    def test_fractional_quantities(self, make_lot, repack_product):
        """Lots move by rounded units; the run keeps the requested values."""
        source = make_lot(10)

        result = ledger.convert_inventory(source, Decimal('2.5'), repack_product, Decimal('7.4'))

        source.refresh_from_db()
        assert source.quantity_current == 7
        assert result.destination_lot.quantity_current == 7
        run, = result.runs
        assert run.quantity_consumed == Decimal('2.5')
        assert run.quantity_produced == Decimal('7.4')

    def test_consuming_everything_depletes(self, make_lot, repack_product):
        source = make_lot(10)

        ledger.convert_inventory(source, 10, repack_product, 10)

        source.refresh_from_db()
        assert (source.quantity_current, source.status) == (0, LotStatus.DEPLETED)

    def test_expired_source_stays_expired(self, make_lot, repack_product):
        """Drawing from an EXPIRED source does not lift its status."""
        source = make_lot(10, status=LotStatus.EXPIRED)

        ledger.convert_inventory(source, 4, repack_product, 4)

        source.refresh_from_db()
        assert (source.quantity_current, source.status) == (6, LotStatus.EXPIRED)

    def test_insufficient_quantity_changes_nothing(self, make_lot, repack_product):
        """Consuming 15 from a lot of 10 fails with no side effects."""
        source = make_lot(10)

        with pytest.raises(LedgerError) as exc:
            ledger.convert_inventory(source, 15, repack_product, 15)

        assert exc.value.code == 'INSUFFICIENT_QUANTITY'
        assert exc.value.available == 10
        source.refresh_from_db()
        assert source.quantity_current == 10
        assert InventoryLot.objects.count() == 1
        assert not ProductionRun.objects.exists()

    def test_missing_gtin(self, make_lot, product_without_gtin):
        source = make_lot(10)

        with pytest.raises(LedgerError) as exc:
            ledger.convert_inventory(source, 5, product_without_gtin, 5)

        assert exc.value.code == 'MISSING_GTIN'
        source.refresh_from_db()
        assert source.quantity_current == 10

    @pytest.mark.parametrize('consumed, produced', [(0, 5), (5, 0), (-1, 5)])
    def test_non_positive_quantities(self, make_lot, repack_product, consumed, produced):
        with pytest.raises(LedgerError) as exc:
            ledger.convert_inventory(make_lot(10), consumed, repack_product, produced)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_produced_rounding_to_zero(self, make_lot, repack_product):
        with pytest.raises(LedgerError) as exc:
            ledger.convert_inventory(make_lot(10), 1, repack_product, Decimal('0.4'))

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_audit_events(self, make_lot, repack_product, audit, django_capture_on_commit_callbacks):
        """Source draw and destination creation are both reported."""
        source = make_lot(40)

        with django_capture_on_commit_callbacks(execute=True):
            result = ledger.convert_inventory(source, 10, repack_product, 24)

        source_event, dest_event = audit.of('CONVERT_LOT')
        assert source_event.entity_id == source.pk
        assert source_event.details['old_qty'] == 40
        assert source_event.details['new_qty'] == 30
        assert dest_event.entity_id == result.destination_lot.pk
        assert dest_event.details['source_lot_numbers'] == [source.lot_number]
        assert dest_event.details['quantity_produced'] == '24.000000'


class TestBatchConvertInventory:
    """Tests for ledger.batch_convert_inventory()."""

    def test_proportional_runs(self, make_lot, repack_product):
        """Consuming 30 and 70 into 50 attributes 15 and 35."""
        a = make_lot(30, expires_in=8)
        b = make_lot(100, expires_in=12)

        result = ledger.batch_convert_inventory([(a, 30), (b, 70)], repack_product, 50)

        produced = [run.quantity_produced for run in result.runs]
        assert produced == [Decimal(15), Decimal(35)]
        assert sum(produced) == Decimal(50)
        assert result.destination_lot.quantity_current == 50

    def test_destination_attributes(self, make_lot, repack_product):
        """Earliest expiry; origin, grower and parent from the first source."""
        first = make_lot(20, expires_in=9, origin_country='US', grower_id='G-1')
        second = make_lot(20, expires_in=3, origin_country='MX', grower_id='G-2')

        dest = ledger.batch_convert_inventory(
            [(first, 5), (second, 5)], repack_product, 8,
        ).destination_lot

        assert dest.expiry_date == second.expiry_date
        assert (dest.origin_country, dest.grower_id) == ('US', 'G-1')
        assert dest.parent_lot == first

    def test_runs_share_destination(self, make_lot, repack_product):
        a, b = make_lot(20), make_lot(20)

        result = ledger.batch_convert_inventory([(a, 5), (b, 5)], repack_product, 8)

        assert {run.destination_lot_id for run in result.runs} == {result.destination_lot.pk}
        assert set(ProductionRun.objects.values_list('source_lot_id', flat=True)) == {a.pk, b.pk}

    def test_validates_all_before_mutating(self, make_lot, repack_product):
        """A short second source leaves the first one untouched."""
        a = make_lot(20)
        b = make_lot(4)

        with pytest.raises(LedgerError) as exc:
            ledger.batch_convert_inventory([(a, 10), (b, 5)], repack_product, 12)

        assert exc.value.code == 'INSUFFICIENT_QUANTITY'
        assert exc.value.data['lot_number'] == b.lot_number
        a.refresh_from_db()
        assert a.quantity_current == 20
        assert not ProductionRun.objects.exists()

    def test_no_sources(self, repack_product):
        with pytest.raises(LedgerError) as exc:
            ledger.batch_convert_inventory([], repack_product, 5)

        assert exc.value.code == 'NO_SOURCE_LOTS'

    def test_duplicate_source(self, make_lot, repack_product):
        a = make_lot(20)

        with pytest.raises(LedgerError) as exc:
            ledger.batch_convert_inventory([(a, 5), (a.pk, 5)], repack_product, 5)

        assert exc.value.code == 'DUPLICATE_SOURCE_LOT'

    def test_uneven_split_is_exact(self, make_lot, repack_product):
        a, b, c = make_lot(10), make_lot(10), make_lot(10)

        result = ledger.batch_convert_inventory([(a, 1), (b, 1), (c, 1)], repack_product, 10)

        assert sum(run.quantity_produced for run in result.runs) == Decimal(10)
        stored = ProductionRun.objects.filter(destination_lot=result.destination_lot)
        assert sum(run.quantity_produced for run in stored) == Decimal(10)
