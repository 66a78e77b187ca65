"""
Enums for Lotman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class UnitType(models.TextChoices):
    """How a product is counted."""
    CASE = 'CASE', _('Case')
    LBS = 'LBS', _('Pounds')
    EACH = 'EACH', _('Each')


class LotStatus(models.TextChoices):
    """
    Lot lifecycle status.

    RECEIVED → QC_PENDING → AVAILABLE → (DEPLETED | EXPIRED)

    DEPLETED is quantity-derived: a lot reaching zero becomes DEPLETED and a
    DEPLETED or EXPIRED lot whose quantity is restored becomes AVAILABLE.
    """
    RECEIVED = 'RECEIVED', _('Received')
    QC_PENDING = 'QC_PENDING', _('QC pending')
    AVAILABLE = 'AVAILABLE', _('Available')
    DEPLETED = 'DEPLETED', _('Depleted')
    EXPIRED = 'EXPIRED', _('Expired')


class OrderStatus(models.TextChoices):
    """
    Order lifecycle status.

    DRAFT → CONFIRMED → PICKING → PARTIAL_PICK → READY_TO_SHIP → SHIPPED

    Only DRAFT → CONFIRMED and READY_TO_SHIP → SHIPPED are requested
    explicitly; the picking states follow from the picks on the order.
    """
    DRAFT = 'DRAFT', _('Draft')
    CONFIRMED = 'CONFIRMED', _('Confirmed')
    PICKING = 'PICKING', _('Picking')
    PARTIAL_PICK = 'PARTIAL_PICK', _('Partially picked')
    READY_TO_SHIP = 'READY_TO_SHIP', _('Ready to ship')
    SHIPPED = 'SHIPPED', _('Shipped')
