"""
Voice pick codes — PTI check codes for voice-directed picking.

Workers read back a 4-digit code printed on the case label to confirm they
are at the right lot. The code is CRC16-CCITT over GTIN + lot number +
date (YYMMDD), modulo 10000.

Examples:
    code = voice_pick_code('00012345678905', '01000042', '251127')
    small, large = split_voice_pick_code(code)  # printed as "12" + big "34"
"""

import binascii
from datetime import date

CRC16_INITIAL = 0xFFFF


def crc16_ccitt(data: str) -> int:
    """CRC16-CCITT (poly 0x1021, init 0xFFFF, no reflection) over the UTF-8 bytes."""
    return binascii.crc_hqx(data.encode('utf-8'), CRC16_INITIAL)


def voice_pick_code(gtin: str, lot_number: str, yymmdd: str) -> str:
    """4-digit check code for a GTIN / lot / date triple."""
    return f"{crc16_ccitt(gtin + lot_number + yymmdd) % 10000:04d}"


def format_voice_pick_date(day: date) -> str:
    return day.strftime('%y%m%d')


def voice_pick_code_for_lot(lot) -> str:
    """Check code of a lot, dated by its received date."""
    return voice_pick_code(
        lot.product.gtin,
        lot.lot_number,
        format_voice_pick_date(lot.received_date),
    )


def validate_voice_pick_code(spoken: str, expected: str) -> bool:
    """Compare what the worker said with the expected code (spaces ignored)."""
    normalized = ''.join(spoken.split()).zfill(4)
    return normalized == expected.zfill(4)


def split_voice_pick_code(code: str) -> tuple[str, str]:
    """Small (first two) and large (last two) digits, as printed on labels."""
    normalized = code.zfill(4)
    return normalized[:2], normalized[2:]
