"""
Lotman Models.

Core models for the lot ledger:
- Product, Customer: master data referenced by lots and orders
- InventoryLot: traceable batch with its current quantity and status
- Order, OrderItem: customer commitments
- OrderAllocation: soft reservation of a lot for an order line
- OrderPick: committed consumption of a lot by an order line
- ProductionRun: conversion of source lots into a destination lot
- LotSequence: counter behind generated lot numbers
"""

from lotman.models.catalog import Customer, Product
from lotman.models.enums import LotStatus, OrderStatus, UnitType
from lotman.models.lot import USABLE_LOT_STATUSES, InventoryLot
from lotman.models.order import Order, OrderAllocation, OrderItem
from lotman.models.pick import OrderPick
from lotman.models.production import ProductionRun
from lotman.models.sequence import LotSequence

__all__ = [
    'UnitType',
    'LotStatus',
    'OrderStatus',
    'USABLE_LOT_STATUSES',
    'Product',
    'Customer',
    'InventoryLot',
    'Order',
    'OrderItem',
    'OrderAllocation',
    'OrderPick',
    'ProductionRun',
    'LotSequence',
]
