"""
Order models — customer commitments and their lines.
"""

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from lotman.models.enums import OrderStatus


class Order(models.Model):
    """
    Customer order.

    Status is stored, but apart from DRAFT → CONFIRMED and the final
    READY_TO_SHIP → SHIPPED it is recomputed from the picks on every
    pick/revert (see lotman.status).
    """

    customer = models.ForeignKey(
        'lotman.Customer',
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('Customer'),
    )
    po_number = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('PO number'),
    )
    delivery_date = models.DateField(verbose_name=_('Delivery date'))
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )
    shipped_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Shipped at'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'status'], name='lotman_order_cust_status_idx'),
            models.Index(fields=['delivery_date'], name='lotman_order_delivery_idx'),
        ]

    @property
    def reference(self) -> str:
        """PO number, or a short id when there is none."""
        return self.po_number or f"#{self.pk}"

    def __str__(self) -> str:
        return f"Order {self.reference} [{self.status}]"


class OrderItem(models.Model):
    """One product line on an order."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Order'),
    )
    product = models.ForeignKey(
        'lotman.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    quantity_ordered = models.PositiveIntegerField(verbose_name=_('Quantity ordered'))

    class Meta:
        verbose_name = _('Order item')
        verbose_name_plural = _('Order items')
        ordering = ['pk']

    @property
    def quantity_picked(self) -> int:
        """Sum of picks recorded against this line."""
        return self.picks.aggregate(
            t=Coalesce(Sum('quantity_picked'), 0)
        )['t']

    @property
    def remaining_to_pick(self) -> int:
        return max(0, self.quantity_ordered - self.quantity_picked)

    def __str__(self) -> str:
        return f"{self.quantity_ordered}x {self.product}"


class OrderAllocation(models.Model):
    """
    Soft reservation of a lot for an order item.

    Not binding: it only keeps the lot selectable for this item after its
    status drifted out of the usable set.
    """

    order_item = models.ForeignKey(
        OrderItem,
        on_delete=models.CASCADE,
        related_name='allocations',
        verbose_name=_('Order item'),
    )
    inventory_lot = models.ForeignKey(
        'lotman.InventoryLot',
        on_delete=models.PROTECT,
        related_name='allocations',
        verbose_name=_('Lot'),
    )
    quantity_allocated = models.PositiveIntegerField(verbose_name=_('Quantity allocated'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Order allocation')
        verbose_name_plural = _('Order allocations')

    def __str__(self) -> str:
        return f"{self.quantity_allocated} from {self.inventory_lot.lot_number}"
