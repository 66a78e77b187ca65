"""
Lot store — the only code that writes InventoryLot quantity and status.

All methods use transaction.atomic() with the lot row locked.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from django.db import transaction

from lotman.audit import emit
from lotman.exceptions import LedgerError
from lotman.models.catalog import Product
from lotman.models.enums import LotStatus
from lotman.models.lot import USABLE_LOT_STATUSES, InventoryLot
from lotman.numbering import next_lot_number
from lotman.protocols.audit import AuditAction, EntityType
from lotman.services.lookup import fetch
from lotman.status import derive_lot_status

logger = logging.getLogger('lotman')

LOT_NUMBER_PATTERN = re.compile(r'^[A-Za-z0-9-]+$')

# Explicit (non quantity-driven) status changes
ALLOWED_LOT_TRANSITIONS = {
    LotStatus.RECEIVED: (LotStatus.QC_PENDING, LotStatus.AVAILABLE, LotStatus.EXPIRED),
    LotStatus.QC_PENDING: (LotStatus.AVAILABLE, LotStatus.EXPIRED),
    LotStatus.AVAILABLE: (LotStatus.EXPIRED,),
}


@dataclass(frozen=True)
class LotUpdate:
    """Outcome of a quantity mutation."""

    lot: InventoryLot
    old_quantity: int
    old_status: str

    @property
    def new_quantity(self) -> int:
        return self.lot.quantity_current

    @property
    def diff(self) -> int:
        return self.lot.quantity_current - self.old_quantity

    @property
    def status_changed(self) -> bool:
        return self.lot.status != self.old_status


class LotStore:
    """Lot quantity and status mutations."""

    @classmethod
    def set_quantity(cls, lot, new_quantity: int, user=None, *,
                     action: AuditAction = AuditAction.ADJUST_QTY,
                     entity: tuple[EntityType, Any] | None = None,
                     context: dict[str, Any] | None = None) -> LotUpdate:
        """
        Set a lot's current quantity and derive its status.

        Status: 0 → DEPLETED; >0 from DEPLETED/EXPIRED → AVAILABLE;
        otherwise unchanged.

        Args:
            lot: InventoryLot or pk
            new_quantity: Absolute quantity (>= 0)
            user: Acting user
            action: Audit action reported for this mutation
            entity: (entity_type, entity_id) of the audit event, default the lot
            context: Extra audit details from the calling operation

        Raises:
            LedgerError('INVALID_QUANTITY'): If new_quantity < 0
            LedgerError('NOT_FOUND'): If the lot does not exist

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on the lot
        """
        if new_quantity < 0:
            raise LedgerError('INVALID_QUANTITY', 'Quantity cannot be negative', requested=new_quantity)

        with transaction.atomic():
            locked = fetch(InventoryLot, lot, lock=True, related=('product',))
            return cls._write_quantity(locked, new_quantity, user, action, entity, context)

    @classmethod
    def adjust_by(cls, lot, delta: int, user=None, *,
                  action: AuditAction = AuditAction.ADJUST_QTY,
                  entity: tuple[EntityType, Any] | None = None,
                  context: dict[str, Any] | None = None) -> LotUpdate:
        """
        Move a lot's current quantity by delta (negative draws, positive restores).

        Raises:
            LedgerError('INVALID_QUANTITY'): If the result would be negative

        Concurrency:
            - Runs under transaction.atomic()
            - Reads and writes the quantity under the same row lock
        """
        with transaction.atomic():
            locked = fetch(InventoryLot, lot, lock=True, related=('product',))
            new_quantity = locked.quantity_current + delta
            if new_quantity < 0:
                raise LedgerError(
                    'INVALID_QUANTITY',
                    'Quantity cannot be negative',
                    available=locked.quantity_current,
                    requested=-delta,
                )
            return cls._write_quantity(locked, new_quantity, user, action, entity, context)

    @classmethod
    def _write_quantity(cls, locked: InventoryLot, new_quantity: int, user,
                        action: AuditAction, entity, context) -> LotUpdate:
        old_quantity = locked.quantity_current
        old_status = locked.status

        locked.quantity_current = new_quantity
        locked.status = derive_lot_status(old_status, old_quantity, new_quantity)
        locked.save(update_fields=['quantity_current', 'status', 'updated_at'])

        update = LotUpdate(lot=locked, old_quantity=old_quantity, old_status=old_status)
        entity_type, entity_id = entity or (EntityType.LOT, locked.pk)
        emit(user, action, entity_type, entity_id, {
            'lot_id': locked.pk,
            'lot_number': locked.lot_number,
            'product_id': locked.product_id,
            'product_sku': locked.product.sku,
            'product_name': locked.product.name,
            'unit_type': locked.product.unit_type,
            'old_qty': old_quantity,
            'new_qty': new_quantity,
            'old_status': old_status,
            'new_status': locked.status,
            **(context or {}),
        })
        return update

    @classmethod
    def adjust_quantity(cls, lot, new_quantity: int, reason: str,
                        user=None, notes: str = '') -> LotUpdate:
        """
        Manual adjustment (cycle count, damage, correction).

        Sets the quantity directly, independent of picks, and reports
        old/new quantity, diff and reason to the audit trail.

        Raises:
            LedgerError('REASON_REQUIRED'): If reason is empty
            LedgerError('INVALID_QUANTITY'): If new_quantity < 0
        """
        if not reason:
            raise LedgerError('REASON_REQUIRED')
        if new_quantity < 0:
            raise LedgerError('INVALID_QUANTITY', 'Quantity cannot be negative', requested=new_quantity)

        with transaction.atomic():
            locked = fetch(InventoryLot, lot, lock=True, related=('product',))
            old_quantity = locked.quantity_current
            diff = new_quantity - old_quantity
            sign = '+' if diff > 0 else ''
            update = cls._write_quantity(locked, new_quantity, user, AuditAction.ADJUST_QTY, None, {
                'diff': diff,
                'reason': reason,
                'notes': notes or None,
                'summary': (
                    f"{reason}: Adjusted {locked.product.name} (Lot {locked.lot_number}) "
                    f"from {old_quantity} to {new_quantity} "
                    f"{locked.product.unit_type} ({sign}{diff})"
                ),
            })
            logger.info(
                "lot.adjust",
                extra={
                    "lot_id": locked.pk,
                    "old_qty": update.old_quantity,
                    "new_qty": update.new_quantity,
                    "reason": reason,
                },
            )
            return update

    @classmethod
    def receive(cls, quantity: int, product, expiry_date: date, origin_country: str,
                grower_id: str = '', lot_number: str | None = None,
                received_date: date | None = None, user=None) -> InventoryLot:
        """
        Lot entry from receiving.

        Creates a RECEIVED lot with original = received = current = quantity.

        Raises:
            LedgerError('INVALID_QUANTITY'): If quantity <= 0
            LedgerError('MISSING_GTIN'): If the product has no GTIN
            LedgerError('INVALID_LOT_NUMBER'): If lot_number has other characters
            LedgerError('DUPLICATE_LOT_NUMBER'): If lot_number is taken
        """
        if quantity <= 0:
            raise LedgerError('INVALID_QUANTITY', requested=quantity)
        if lot_number is not None and not LOT_NUMBER_PATTERN.match(lot_number):
            raise LedgerError('INVALID_LOT_NUMBER', lot_number=lot_number)

        with transaction.atomic():
            product = fetch(Product, product)
            if not product.gtin:
                raise LedgerError(
                    'MISSING_GTIN',
                    f"Cannot receive {product.name}: missing GTIN in master data",
                    product_id=product.pk,
                )

            if lot_number is None:
                lot_number = next_lot_number()
            elif InventoryLot.objects.filter(lot_number=lot_number).exists():
                raise LedgerError('DUPLICATE_LOT_NUMBER', lot_number=lot_number)

            lot = InventoryLot.objects.create(
                lot_number=lot_number,
                product=product,
                original_quantity=quantity,
                quantity_received=quantity,
                quantity_current=quantity,
                received_date=received_date or date.today(),
                expiry_date=expiry_date,
                origin_country=origin_country,
                grower_id=grower_id or '',
                status=LotStatus.RECEIVED,
            )

            emit(user, AuditAction.RECEIVE, EntityType.LOT, lot.pk, {
                'lot_number': lot.lot_number,
                'product_id': product.pk,
                'product_sku': product.sku,
                'quantity': quantity,
                'expiry_date': expiry_date.isoformat(),
                'origin_country': origin_country,
            })
            logger.info(
                "lot.receive",
                extra={
                    "lot_id": lot.pk,
                    "lot_number": lot.lot_number,
                    "product": product.sku,
                    "qty": quantity,
                },
            )
            return lot

    @classmethod
    def transition_lot(cls, lot, status: str, reason: str = '', user=None) -> InventoryLot:
        """
        Explicit status change (QC release, expiry).

        RECEIVED → QC_PENDING | AVAILABLE | EXPIRED
        QC_PENDING → AVAILABLE | EXPIRED
        AVAILABLE → EXPIRED

        Raises:
            LedgerError('INVALID_TRANSITION'): For any other pair
        """
        with transaction.atomic():
            locked = fetch(InventoryLot, lot, lock=True)
            allowed = ALLOWED_LOT_TRANSITIONS.get(locked.status, ())
            if status not in allowed:
                raise LedgerError(
                    'INVALID_TRANSITION',
                    current=locked.status,
                    requested=status,
                    expected=list(allowed),
                )

            old_status = locked.status
            locked.status = status
            locked.save(update_fields=['status', 'updated_at'])

            emit(user, AuditAction.STATUS_CHANGE, EntityType.LOT, locked.pk, {
                'lot_number': locked.lot_number,
                'old_status': old_status,
                'new_status': status,
                'reason': reason or None,
            })
            logger.info(
                "lot.status",
                extra={"lot_id": locked.pk, "from": old_status, "to": status},
            )
            return locked

    @classmethod
    def expire_lots(cls, as_of: date | None = None, batch_size: int | None = None) -> int:
        """
        Mark usable lots past their expiry date as EXPIRED.

        Returns:
            Number of lots expired

        Concurrency:
            - Each batch runs under its own transaction.atomic()
            - Uses select_for_update() with SKIP LOCKED
            - Safe for multiple instances
        """
        from lotman.conf import lotman_settings

        cutoff = as_of or date.today()
        size = batch_size or lotman_settings.EXPIRE_BATCH_SIZE
        total = 0

        while True:
            with transaction.atomic():
                batch = list(
                    InventoryLot.objects.select_for_update(skip_locked=True)
                    .filter(status__in=USABLE_LOT_STATUSES)
                    .expiring_before(cutoff)
                    .order_by('pk')[:size]
                )
                if not batch:
                    break

                for lot in batch:
                    emit(None, AuditAction.EXPIRE, EntityType.LOT, lot.pk, {
                        'lot_number': lot.lot_number,
                        'old_status': lot.status,
                        'expiry_date': lot.expiry_date.isoformat(),
                    })
                InventoryLot.objects.filter(pk__in=[lot.pk for lot in batch]).update(
                    status=LotStatus.EXPIRED,
                )
                total += len(batch)

        if total:
            logger.info(
                "lot.expired",
                extra={"expired": total, "as_of": str(cutoff)},
            )
        return total
