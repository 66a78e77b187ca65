"""
OrderPick model — what an order line consumed from which lot.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class OrderPick(models.Model):
    """
    Immutable record of a pick.

    Rules:
    - Created only by ledger.submit_pick(), together with the lot decrement
    - NEVER update()
    - Removed only by ledger.revert_pick(), which restores the lot quantity

    The picks of non-shipped orders are the "committed" quantity of a lot.
    """

    order_item = models.ForeignKey(
        'lotman.OrderItem',
        on_delete=models.CASCADE,
        related_name='picks',
        verbose_name=_('Order item'),
    )
    inventory_lot = models.ForeignKey(
        'lotman.InventoryLot',
        on_delete=models.PROTECT,
        related_name='picks',
        verbose_name=_('Lot'),
    )
    quantity_picked = models.PositiveIntegerField(verbose_name=_('Quantity picked'))

    picked_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Picked at'))
    picked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Picked by'),
    )

    class Meta:
        verbose_name = _('Order pick')
        verbose_name_plural = _('Order picks')
        ordering = ['picked_at', 'pk']
        indexes = [
            models.Index(fields=['inventory_lot', 'picked_at'], name='lotman_pick_lot_picked_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Picks are immutable. "
                "Revert the pick and submit a new one."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent direct deletion — the lot would stay short."""
        raise ValueError(
            "Picks can only be removed with ledger.revert_pick(), "
            "which restores the lot quantity."
        )

    def __str__(self) -> str:
        return f"{self.quantity_picked} from {self.inventory_lot.lot_number}"
