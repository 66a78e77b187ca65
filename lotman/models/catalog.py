"""
Catalog models — products and customers referenced by lots and orders.

Master data is owned by an external system (accounting sync); these rows
are its local copy and are never changed by the ledger.
"""

from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from lotman.models.enums import UnitType


gtin_validator = RegexValidator(
    regex=r'^\d{14}$',
    message=_('GTIN must have exactly 14 digits.'),
)


class Product(models.Model):
    """
    A sellable item. Owns zero or more inventory lots.

    The GTIN is the trace identifier printed on case labels; lots can only
    be received or produced for products that have one.
    """

    sku = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('SKU'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    unit_type = models.CharField(
        max_length=10,
        choices=UnitType.choices,
        default=UnitType.CASE,
        verbose_name=_('Unit type'),
    )
    standard_case_weight = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Standard case weight'),
    )
    gtin = models.CharField(
        max_length=14,
        blank=True,
        default='',
        validators=[gtin_validator],
        verbose_name=_('GTIN'),
    )
    default_origin_country = models.CharField(
        max_length=60,
        blank=True,
        default='',
        verbose_name=_('Default origin country'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"


class Customer(models.Model):
    """Customer an order is shipped to."""

    code = models.CharField(max_length=50, unique=True, verbose_name=_('Code'))
    name = models.CharField(max_length=200, verbose_name=_('Name'))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Customer')
        verbose_name_plural = _('Customers')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
