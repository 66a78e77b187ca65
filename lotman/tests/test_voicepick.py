"""
Tests for voice pick check codes.
"""

from datetime import date

import pytest

from lotman.voicepick import (
    crc16_ccitt,
    format_voice_pick_date,
    split_voice_pick_code,
    validate_voice_pick_code,
    voice_pick_code,
    voice_pick_code_for_lot,
)


class TestCrc16:

    def test_check_value(self):
        """Standard CRC-16/CCITT-FALSE check value."""
        assert crc16_ccitt('123456789') == 0x29B1

    def test_empty(self):
        assert crc16_ccitt('') == 0xFFFF

    def test_non_ascii_hashed_as_utf8(self):
        """'é' is the two bytes C3 A9, not code point E9."""
        assert crc16_ccitt('é') == 0x7ACB

    def test_non_ascii_lot_number(self):
        code = voice_pick_code('00012345678905', 'LOTÉ-1', '251127')
        assert len(code) == 4 and code.isdigit()


class TestVoicePickCode:

    def test_concatenates_inputs(self):
        """0x29B1 = 10673 → 0673."""
        assert voice_pick_code('1234', '567', '89') == '0673'

    def test_four_digits(self):
        code = voice_pick_code('00012345678905', '01000042', '251127')

        assert len(code) == 4
        assert code.isdigit()

    def test_date_format(self):
        assert format_voice_pick_date(date(2025, 11, 27)) == '251127'

    @pytest.mark.django_db
    def test_for_lot_uses_received_date(self, make_lot):
        lot = make_lot(received_date=date(2025, 11, 27))

        assert voice_pick_code_for_lot(lot) == voice_pick_code(
            lot.product.gtin, lot.lot_number, '251127',
        )


class TestValidateVoicePickCode:

    def test_ignores_whitespace(self):
        assert validate_voice_pick_code(' 06 73 ', '0673')

    def test_restores_leading_zero(self):
        assert validate_voice_pick_code('673', '0673')

    def test_mismatch(self):
        assert not validate_voice_pick_code('0674', '0673')


def test_split_voice_pick_code():
    assert split_voice_pick_code('0673') == ('06', '73')
    assert split_voice_pick_code('73') == ('00', '73')
