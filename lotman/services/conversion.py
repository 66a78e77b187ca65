"""
Conversion engine — repacks source lots into a new destination lot.

Lots hold whole units, so the source draw and the destination quantity are
the requested quantities rounded half up. Production runs keep the
requested (unrounded) quantities, quantized to 6 decimal places.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from lotman.audit import emit
from lotman.exceptions import LedgerError
from lotman.models.catalog import Product
from lotman.models.enums import LotStatus
from lotman.models.lot import InventoryLot
from lotman.models.production import ProductionRun
from lotman.numbering import next_lot_number
from lotman.protocols.audit import AuditAction, EntityType
from lotman.services.lookup import fetch, pk_of
from lotman.services.lots import LotStore

logger = logging.getLogger('lotman')

QUANTUM = Decimal('0.000001')


def to_quantity(value) -> Decimal:
    """Decimal quantity at production-run precision."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(QUANTUM, rounding=ROUND_HALF_UP)


def whole_units(value: Decimal) -> int:
    """Round half up to whole lot units."""
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def proportional_split(consumed: list[Decimal], produced: Decimal) -> list[Decimal]:
    """
    Attribute produced across sources in proportion to what each consumed.

    share_i = consumed_i / sum(consumed) * produced, quantized; the last
    share takes the remainder so the shares add up to produced exactly.

    >>> proportional_split([Decimal(30), Decimal(70)], Decimal(50))
    [Decimal('15.000000'), Decimal('35.000000')]
    """
    total = sum(consumed, Decimal('0'))
    if not consumed or total <= 0:
        raise ValueError("consumed quantities must be positive")

    shares = [
        (part / total * produced).quantize(QUANTUM, rounding=ROUND_HALF_UP)
        for part in consumed[:-1]
    ]
    shares.append(produced - sum(shares, Decimal('0')))
    return shares


@dataclass(frozen=True)
class SourceInput:
    """One source of a batch conversion."""

    lot: object
    quantity_consumed: Decimal | int | float


@dataclass(frozen=True)
class ConversionResult:
    destination_lot: InventoryLot
    source_lots: list[InventoryLot]
    runs: list[ProductionRun]


class ConversionEngine:
    """Single and batch lot conversion."""

    @classmethod
    def convert_inventory(cls, source_lot, quantity_consumed, output_product,
                          quantity_produced, user=None, notes: str = '') -> ConversionResult:
        """
        Convert part of one lot into a new lot of output_product.

        The destination is RECEIVED, has source_lot as parent and inherits
        its expiry date, origin country and grower.

        Raises:
            LedgerError('INVALID_QUANTITY'): A quantity <= 0
            LedgerError('INSUFFICIENT_QUANTITY'): Source has less than the
                rounded quantity consumed
            LedgerError('MISSING_GTIN'): Output product has no GTIN
            LedgerError('NOT_FOUND'): Lot or product does not exist

        Concurrency:
            - Runs under transaction.atomic(); any failure leaves both lots
              unchanged and creates nothing
            - Locks the source lot with select_for_update()
        """
        return cls.batch_convert_inventory(
            [SourceInput(source_lot, quantity_consumed)],
            output_product,
            quantity_produced,
            user=user,
            notes=notes,
        )

    @classmethod
    def batch_convert_inventory(cls, sources: list, output_product,
                                quantity_produced, user=None, notes: str = '') -> ConversionResult:
        """
        Convert several lots into one new lot of output_product.

        - Every source is checked before any is drawn down
        - Expiry: the earliest among the sources
        - Origin country, grower and parent lot: the first listed source
        - One ProductionRun per source; quantity_produced is split in
          proportion to quantity consumed and the shares add up exactly

        Args:
            sources: SourceInput (or (lot, quantity_consumed) pairs)
            output_product: Product instance or pk
            quantity_produced: Total produced
            user: Acting user
            notes: Stored on every production run

        Raises:
            LedgerError('NO_SOURCE_LOTS'): Empty sources
            LedgerError('DUPLICATE_SOURCE_LOT'): A lot listed twice
            LedgerError('INVALID_QUANTITY'): A quantity <= 0
            LedgerError('INSUFFICIENT_QUANTITY'): A source is short
            LedgerError('MISSING_GTIN'): Output product has no GTIN

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the source lots in primary key order
        """
        sources = [s if isinstance(s, SourceInput) else SourceInput(*s) for s in sources]
        if not sources:
            raise LedgerError('NO_SOURCE_LOTS')

        source_ids = [pk_of(s.lot) for s in sources]
        if len(set(source_ids)) != len(source_ids):
            raise LedgerError('DUPLICATE_SOURCE_LOT', lots=source_ids)

        consumed = [to_quantity(s.quantity_consumed) for s in sources]
        produced = to_quantity(quantity_produced)
        for quantity in (*consumed, produced):
            if quantity <= 0:
                raise LedgerError('INVALID_QUANTITY', requested=str(quantity))
        if whole_units(produced) < 1:
            raise LedgerError(
                'INVALID_QUANTITY',
                "Quantity produced rounds to zero units",
                requested=str(produced),
            )

        with transaction.atomic():
            locked = {
                pk: fetch(InventoryLot, pk, lock=True, related=('product',))
                for pk in sorted(source_ids)
            }
            lots = [locked[pk] for pk in source_ids]

            for lot, quantity in zip(lots, consumed):
                draw = whole_units(quantity)
                if lot.quantity_current < draw:
                    raise LedgerError(
                        'INSUFFICIENT_QUANTITY',
                        f"Insufficient quantity in lot {lot.lot_number}. "
                        f"Available: {lot.quantity_current}, Required: {draw}",
                        available=lot.quantity_current,
                        requested=draw,
                        lot_number=lot.lot_number,
                    )

            product = fetch(Product, output_product)
            if not product.gtin:
                raise LedgerError(
                    'MISSING_GTIN',
                    f"Output product {product.name} is missing GTIN",
                    product_id=product.pk,
                )

            lot_number = next_lot_number()
            primary = lots[0]

            updated_sources = []
            for lot, quantity in zip(lots, consumed):
                update = LotStore.adjust_by(
                    lot, -whole_units(quantity), user,
                    action=AuditAction.CONVERT_LOT,
                    context={
                        'quantity_consumed': str(quantity),
                        'destination_lot_number': lot_number,
                        'destination_product': product.name,
                    },
                )
                updated_sources.append(update.lot)

            units = whole_units(produced)
            destination = InventoryLot.objects.create(
                lot_number=lot_number,
                product=product,
                parent_lot=primary,
                original_quantity=units,
                quantity_received=units,
                quantity_current=units,
                received_date=date.today(),
                expiry_date=min(lot.expiry_date for lot in lots),
                origin_country=primary.origin_country,
                grower_id=primary.grower_id,
                status=LotStatus.RECEIVED,
            )

            shares = proportional_split(consumed, produced)
            runs = [
                ProductionRun.objects.create(
                    source_lot=lot,
                    destination_lot=destination,
                    quantity_consumed=quantity,
                    quantity_produced=share,
                    notes=notes or '',
                    user=user,
                )
                for lot, quantity, share in zip(lots, consumed, shares)
            ]

            source_numbers = ', '.join(lot.lot_number for lot in lots)
            emit(user, AuditAction.CONVERT_LOT, EntityType.LOT, destination.pk, {
                'source_lot_ids': source_ids,
                'source_lot_numbers': [lot.lot_number for lot in lots],
                'destination_lot_id': destination.pk,
                'destination_lot_number': destination.lot_number,
                'destination_product': product.name,
                'quantity_consumed': str(sum(consumed, Decimal('0'))),
                'quantity_produced': str(produced),
                'unit_type': product.unit_type,
                'notes': notes or None,
                'summary': (
                    f"Converted {sum(consumed, Decimal('0')).normalize()} from Lot "
                    f"{source_numbers} to {produced.normalize()} {product.unit_type} "
                    f"in Lot {destination.lot_number}"
                ),
            })
            logger.info(
                "lot.convert",
                extra={
                    "sources": source_ids,
                    "destination_lot_id": destination.pk,
                    "consumed": str(sum(consumed, Decimal('0'))),
                    "produced": str(produced),
                },
            )

            return ConversionResult(
                destination_lot=destination,
                source_lots=updated_sources,
                runs=runs,
            )
