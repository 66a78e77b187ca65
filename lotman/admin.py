"""
Lotman Admin.

Catalog and orders are editable; lots, picks and production runs are
read-only because their quantities change only through the ledger:
- Product / Customer: list + edit
- Order: list + edit header, items read-only inline
- InventoryLot: read-only with remaining quantity
- OrderPick: read-only with "revert" action
- ProductionRun: read-only lineage
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from lotman.exceptions import LedgerError
from lotman.models import (
    Customer,
    InventoryLot,
    Order,
    OrderItem,
    OrderPick,
    Product,
    ProductionRun,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdmin(admin.ModelAdmin):
    """No add/change/delete from the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'unit_type', 'gtin', 'is_active']
    list_filter = ['unit_type', 'is_active']
    search_fields = ['sku', 'name', 'gtin']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['code', 'name']
    search_fields = ['code', 'name']


# =========================================================================
# ORDERS
# =========================================================================

class OrderItemInline(admin.TabularInline):
    model = OrderItem
    fields = ['product', 'quantity_ordered', 'picked_display']
    readonly_fields = ['product', 'quantity_ordered', 'picked_display']
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Picked'))
    def picked_display(self, obj):
        return obj.quantity_picked


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Order admin — status is read-only, it follows the picks."""

    list_display = ['__str__', 'customer', 'delivery_date', 'status', 'shipped_at']
    list_filter = ['status', 'delivery_date']
    search_fields = ['po_number', 'customer__name', 'customer__code']
    readonly_fields = ['status', 'shipped_at', 'created_by', 'created_at', 'updated_at']
    inlines = [OrderItemInline]
    date_hierarchy = 'delivery_date'


# =========================================================================
# LOTS (read-only)
# =========================================================================

@admin.register(InventoryLot)
class InventoryLotAdmin(ReadOnlyAdmin):
    """Lot admin — read-only. Quantities change only via the ledger."""

    list_display = ['lot_number', 'product', 'quantity_current', 'remaining_display',
                    'expiry_date', 'status']
    list_filter = ['status', 'expiry_date']
    search_fields = ['lot_number', 'product__sku', 'product__name', 'grower_id']
    readonly_fields = ['lot_number', 'product', 'parent_lot', 'original_quantity',
                       'quantity_received', 'quantity_current', 'received_date',
                       'expiry_date', 'origin_country', 'grower_id', 'status',
                       'created_at', 'updated_at']
    date_hierarchy = 'expiry_date'

    @admin.display(description=_('Remaining'))
    def remaining_display(self, obj):
        from lotman import ledger

        return ledger.remaining_quantity(obj)


# =========================================================================
# PICKS (read-only with revert action)
# =========================================================================

@admin.register(OrderPick)
class OrderPickAdmin(ReadOnlyAdmin):
    """Pick admin — read-only with revert action."""

    list_display = ['id', 'order_display', 'inventory_lot', 'quantity_picked',
                    'picked_at', 'picked_by']
    list_filter = ['picked_at']
    search_fields = ['inventory_lot__lot_number', 'order_item__order__po_number']
    readonly_fields = ['order_item', 'inventory_lot', 'quantity_picked',
                       'picked_at', 'picked_by']
    actions = ['revert_picks']

    @admin.display(description=_('Order'))
    def order_display(self, obj):
        return str(obj.order_item.order)

    @admin.action(description=_('Revert selected picks'))
    def revert_picks(self, request, queryset):
        from lotman import ledger

        count = 0
        for pick in queryset:
            try:
                ledger.revert_pick(pick.pk, user=request.user)
                count += 1
            except LedgerError as exc:
                logger.warning("revert_picks: failed to revert pick %s: %s", pick.pk, exc)

        self.message_user(request, _('{count} pick(s) reverted.').format(count=count))


# =========================================================================
# PRODUCTION RUNS (read-only)
# =========================================================================

@admin.register(ProductionRun)
class ProductionRunAdmin(ReadOnlyAdmin):
    """Production run admin — immutable lineage."""

    list_display = ['created_at', 'source_lot', 'destination_lot',
                    'quantity_consumed', 'quantity_produced', 'user']
    list_filter = ['created_at']
    search_fields = ['source_lot__lot_number', 'destination_lot__lot_number']
    readonly_fields = ['source_lot', 'destination_lot', 'quantity_consumed',
                       'quantity_produced', 'notes', 'user', 'created_at']
    date_hierarchy = 'created_at'
