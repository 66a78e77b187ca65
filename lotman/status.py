"""
Status policy — isolated, testable, reusable.

Pure functions deciding lot and order status from quantities and picks.
The ledger stores the results; nothing here touches the database.

Examples:
    - Lot at 0 units: DEPLETED
    - DEPLETED/EXPIRED lot given quantity back: AVAILABLE
    - Order whose items are all fully picked: READY_TO_SHIP
"""

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass

from lotman.models.enums import LotStatus, OrderStatus


# Order statuses that accept new picks
PICKABLE_ORDER_STATUSES = (
    OrderStatus.CONFIRMED,
    OrderStatus.PICKING,
    OrderStatus.PARTIAL_PICK,
    OrderStatus.READY_TO_SHIP,
)

# Lot statuses lifted back to AVAILABLE when quantity is restored
RESTORABLE_LOT_STATUSES = (LotStatus.DEPLETED, LotStatus.EXPIRED)


@dataclass(frozen=True)
class ItemProgress:
    """Picking progress of one order line."""

    quantity_ordered: int
    quantity_picked: int

    @property
    def fully_picked(self) -> bool:
        return self.quantity_picked >= self.quantity_ordered

    @property
    def partially_picked(self) -> bool:
        return 0 < self.quantity_picked < self.quantity_ordered


def derive_lot_status(old_status: str, old_quantity: int, new_quantity: int) -> str:
    """
    Lot status after its quantity changed from old_quantity to new_quantity.

    Args:
        old_status: Status before the mutation
        old_quantity: Quantity before the mutation
        new_quantity: Quantity after the mutation (>= 0)

    Returns:
        DEPLETED at zero, AVAILABLE when a depleted/expired lot gets
        quantity back, otherwise old_status. Draws never lift a status.
    """
    if new_quantity == 0:
        return LotStatus.DEPLETED
    if new_quantity > old_quantity and old_status in RESTORABLE_LOT_STATUSES:
        return LotStatus.AVAILABLE
    return old_status


def all_fully_picked(items: Iterable[ItemProgress]) -> bool:
    """Every line picked up to its ordered quantity."""
    return all(item.fully_picked for item in items)


def status_after_pick(current: str, items: list[ItemProgress], first_pick: bool) -> str:
    """
    Order status after a pick was recorded.

    Forward only: never regresses.

    Args:
        current: Order status before the pick
        items: Progress of every line, including the new pick
        first_pick: True when the order had no picks before this one
    """
    if all_fully_picked(items):
        return OrderStatus.READY_TO_SHIP
    if current == OrderStatus.CONFIRMED and first_pick:
        return OrderStatus.PICKING
    if current == OrderStatus.PICKING and any(item.partially_picked for item in items):
        return OrderStatus.PARTIAL_PICK
    return current


def status_after_revert(ordered: Mapping[Hashable, int],
                        picks: Iterable[tuple[Hashable, int]]) -> str:
    """
    Order status after a pick was removed.

    Replays the forward rules of status_after_pick() from CONFIRMED over
    the picks that remain, so a pick followed by its revert lands exactly
    where the order was before the pick.

    Args:
        ordered: Ordered quantity per line key
        picks: Remaining (line key, quantity) picks, oldest first

    Example:
        >>> status_after_revert({1: 5}, [(1, 2)])
        'PICKING'
    """
    picked = dict.fromkeys(ordered, 0)
    status = OrderStatus.CONFIRMED
    for index, (key, quantity) in enumerate(picks):
        picked[key] += quantity
        progress = [ItemProgress(ordered[k], picked[k]) for k in ordered]
        status = status_after_pick(status, progress, first_pick=index == 0)
    return str(status)
