"""
ProductionRun model — immutable record of a repack/conversion.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class ProductionRun(models.Model):
    """
    One source lot feeding one destination lot.

    A batch conversion writes one run per source lot, all sharing the
    destination; quantity_produced is then the source's proportional share.
    Quantities are the requested ones, not rounded to whole units.
    """

    source_lot = models.ForeignKey(
        'lotman.InventoryLot',
        on_delete=models.PROTECT,
        related_name='source_runs',
        verbose_name=_('Source lot'),
    )
    destination_lot = models.ForeignKey(
        'lotman.InventoryLot',
        on_delete=models.PROTECT,
        related_name='destination_runs',
        verbose_name=_('Destination lot'),
    )
    quantity_consumed = models.DecimalField(
        max_digits=14,
        decimal_places=6,
        verbose_name=_('Quantity consumed'),
    )
    quantity_produced = models.DecimalField(
        max_digits=14,
        decimal_places=6,
        verbose_name=_('Quantity produced'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('User'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = _('Production run')
        verbose_name_plural = _('Production runs')
        ordering = ['created_at', 'pk']

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Production runs are immutable.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Production runs are immutable.")

    def __str__(self) -> str:
        return (
            f"{self.source_lot.lot_number} → {self.destination_lot.lot_number}: "
            f"{self.quantity_consumed} → {self.quantity_produced}"
        )
