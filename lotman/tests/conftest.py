"""
Pytest fixtures for Lotman tests.
"""

from datetime import date, timedelta

import pytest
from django.contrib.auth import get_user_model

from lotman.adapters import emitter as emitter_module
from lotman.models import (
    Customer,
    InventoryLot,
    LotStatus,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    UnitType,
)
from lotman.protocols.audit import AuditEvent


User = get_user_model()


class RecordingAuditEmitter:
    """Keeps every event in memory."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def record(self, actor_id, action, entity_type, entity_id, details):
        self.events.append(AuditEvent(actor_id, action, entity_type, entity_id, details))

    def actions(self) -> list[str]:
        return [event.action for event in self.events]

    def of(self, action: str) -> list[AuditEvent]:
        return [event for event in self.events if event.action == action]


@pytest.fixture
def audit(monkeypatch):
    """Install a recording audit emitter."""
    recorder = RecordingAuditEmitter()
    monkeypatch.setattr(emitter_module, '_audit_emitter', recorder)
    return recorder


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='packer',
        password='testpass123'
    )


@pytest.fixture
def product(db):
    """Product with a GTIN (cases)."""
    return Product.objects.create(
        sku='STRAW-12',
        name='Strawberries 12x1lb',
        unit_type=UnitType.CASE,
        gtin='00012345678905',
        default_origin_country='US',
    )


@pytest.fixture
def other_product(db):
    """Second product with a GTIN."""
    return Product.objects.create(
        sku='BLUE-12',
        name='Blueberries 12x6oz',
        unit_type=UnitType.CASE,
        gtin='00012345678912',
        default_origin_country='MX',
    )


@pytest.fixture
def repack_product(db):
    """Conversion output product."""
    return Product.objects.create(
        sku='STRAW-CLAM',
        name='Strawberries clamshell',
        unit_type=UnitType.CASE,
        gtin='10012345678902',
    )


@pytest.fixture
def product_without_gtin(db):
    """Product missing its GTIN in master data."""
    return Product.objects.create(
        sku='MIX-BOX',
        name='Mixed berry box',
        unit_type=UnitType.CASE,
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(code='FRESHMART', name='FreshMart')


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def make_lot(db, product):
    """Factory for lots created directly (bypassing receiving)."""
    counter = {'n': 0}

    def _make(quantity=100, expires_in=10, status=LotStatus.AVAILABLE, lot_product=None, **extra):
        counter['n'] += 1
        return InventoryLot.objects.create(
            lot_number=extra.pop('lot_number', f'T{counter["n"]:04d}'),
            product=lot_product or product,
            original_quantity=quantity,
            quantity_received=quantity,
            quantity_current=quantity,
            expiry_date=date.today() + timedelta(days=expires_in),
            origin_country=extra.pop('origin_country', 'US'),
            status=status,
            **extra,
        )

    return _make


@pytest.fixture
def make_order(db, customer, product):
    """Factory for orders with one line per (product, quantity)."""

    def _make(*lines, status=OrderStatus.CONFIRMED, po_number='PO-1001'):
        order = Order.objects.create(
            customer=customer,
            delivery_date=date.today() + timedelta(days=2),
            po_number=po_number,
            status=status,
        )
        for line_product, quantity in (lines or [(product, 10)]):
            OrderItem.objects.create(order=order, product=line_product, quantity_ordered=quantity)
        return order

    return _make


@pytest.fixture
def lot(make_lot):
    """Available lot of 100 cases."""
    return make_lot(100)


@pytest.fixture
def order(make_order, product):
    """Confirmed order for 10 cases of product."""
    return make_order((product, 10))


@pytest.fixture
def item(order):
    return order.items.get()
