"""
Lot numbering — sequential lot numbers from a row-locked counter.

    next_lot_number()  # '01000001', then '01000002', ...
"""

from django.db import transaction

from lotman.conf import lotman_settings
from lotman.models.sequence import LotSequence

LOT_SEQUENCE_KEY = 'next_lot_sequence'


def next_lot_number() -> str:
    """
    Allocate the next lot number.

    Runs inside the caller's transaction when there is one, so a rolled
    back conversion also gives its number back.

    Concurrency:
        - get_or_create creates the counter row once (unique key)
        - select_for_update() serializes every caller on that row
    """
    with transaction.atomic():
        LotSequence.objects.get_or_create(key=LOT_SEQUENCE_KEY, defaults={'next_value': 1})
        sequence = LotSequence.objects.select_for_update().get(key=LOT_SEQUENCE_KEY)

        current = sequence.next_value
        sequence.next_value = current + 1
        sequence.save(update_fields=['next_value', 'updated_at'])

    return format_lot_number(current)


def format_lot_number(value: int) -> str:
    """Prefix + zero-padded sequence value."""
    digits = lotman_settings.LOT_NUMBER_DIGITS
    return f"{lotman_settings.LOT_NUMBER_PREFIX}{value:0{digits}d}"
