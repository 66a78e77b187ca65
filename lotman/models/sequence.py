"""
LotSequence model — row-locked counter behind generated lot numbers.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LotSequence(models.Model):
    """
    Next value of a named sequence.

    One row per key; next_lot_number() locks it with select_for_update()
    so concurrent processes never hand out the same number.
    """

    key = models.CharField(max_length=50, unique=True, verbose_name=_('Key'))
    next_value = models.PositiveBigIntegerField(default=1, verbose_name=_('Next value'))
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Lot sequence')
        verbose_name_plural = _('Lot sequences')

    def __str__(self) -> str:
        return f"{self.key}: {self.next_value}"
