"""
InventoryLot model — a physically traceable batch of one product.

Lots are created by receiving or as the destination of a conversion, and
their quantity/status are changed only through the ledger:

    lot = ledger.receive(100, product, expiry_date=friday, origin_country='MX')
    ledger.adjust_quantity(lot, 95, reason='Cycle count')
"""

from datetime import date

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from lotman.models.enums import LotStatus


# Statuses a lot can be drawn from without a prior allocation
USABLE_LOT_STATUSES = (
    LotStatus.RECEIVED,
    LotStatus.QC_PENDING,
    LotStatus.AVAILABLE,
)


class LotQuerySet(models.QuerySet):
    """Custom QuerySet for InventoryLot with convenience filters."""

    def for_product(self, product):
        """Lots of a specific product (instance or pk)."""
        return self.filter(product_id=getattr(product, 'pk', product))

    def usable(self):
        """Lots in a fresh status (received, in QC or available)."""
        return self.filter(status__in=USABLE_LOT_STATUSES)

    def with_stock(self):
        """Lots with quantity left."""
        return self.filter(quantity_current__gt=0)

    def effectively_available(self, order_item=None):
        """
        Lots an order item may draw from.

        Two branches, united:
        - usable: status is RECEIVED, QC_PENDING or AVAILABLE
        - reserved: the lot is allocated to this order item, whatever its status
        """
        usable = Q(status__in=USABLE_LOT_STATUSES)
        if order_item is None:
            return self.filter(usable)
        reserved = Q(allocations__order_item_id=getattr(order_item, 'pk', order_item))
        return self.filter(usable | reserved).distinct()

    def fifo(self):
        """Oldest expiry first, then creation order."""
        return self.order_by('expiry_date', 'created_at', 'pk')

    def expiring_before(self, day):
        """Lots whose expiry date is strictly before the given day."""
        return self.filter(expiry_date__lt=day)


class InventoryLot(models.Model):
    """
    Traceable batch of a product with its own quantity and expiry.

    Quantities are whole units of the product's unit type:
    - original_quantity: quantity at creation
    - quantity_received: quantity accepted on receiving/production
    - quantity_current: what is physically left (owned by the ledger)
    """

    lot_number = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Lot number'),
    )
    product = models.ForeignKey(
        'lotman.Product',
        on_delete=models.PROTECT,
        related_name='lots',
        verbose_name=_('Product'),
    )
    parent_lot = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='child_lots',
        verbose_name=_('Parent lot'),
        help_text=_('Source lot this lot was converted from.'),
    )

    original_quantity = models.PositiveIntegerField(verbose_name=_('Original quantity'))
    quantity_received = models.PositiveIntegerField(verbose_name=_('Quantity received'))
    quantity_current = models.PositiveIntegerField(verbose_name=_('Current quantity'))

    received_date = models.DateField(default=date.today, verbose_name=_('Received date'))
    expiry_date = models.DateField(db_index=True, verbose_name=_('Expiry date'))
    origin_country = models.CharField(max_length=60, verbose_name=_('Origin country'))
    grower_id = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Grower ID'),
    )

    status = models.CharField(
        max_length=20,
        choices=LotStatus.choices,
        default=LotStatus.RECEIVED,
        db_index=True,
        verbose_name=_('Status'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LotQuerySet.as_manager()

    class Meta:
        verbose_name = _('Inventory lot')
        verbose_name_plural = _('Inventory lots')
        ordering = ['expiry_date', 'created_at', 'pk']
        indexes = [
            models.Index(fields=['product', 'status'], name='lotman_lot_product_status_idx'),
            models.Index(fields=['product', 'expiry_date'], name='lotman_lot_product_expiry_idx'),
        ]

    @property
    def is_usable(self) -> bool:
        """Is the lot in a fresh status?"""
        return self.status in USABLE_LOT_STATUSES

    def __str__(self) -> str:
        return f"Lot {self.lot_number} ({self.quantity_current} {self.status})"
