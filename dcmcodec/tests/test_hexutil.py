# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Test suite for util/hexutil.py"""

from binascii import Error

import pytest

from dcmcodec.util.hexutil import hex2bytes, bytes2hex


class TestHexUtil:
    """Test the hex related utils"""
    def test_hex_to_bytes(self):
        """Test utils.hexutil.hex2bytes"""
        hexstring = "00 10 20 30 40 50 60 70 80 90 A0 B0 C0 D0 E0 F0"
        bytestring = (
            b'\x00\x10\x20\x30\x40\x50\x60\x70'
            b'\x80\x90\xA0\xB0\xC0\xD0\xE0\xF0'
        )
        assert bytestring == hex2bytes(hexstring)

        hexstring = b"00 10 20 30 40 50 60 70 80 90 A0 B0 C0 D0 E0 F0"
        assert bytestring == hex2bytes(hexstring)

    def test_multiline(self):
        hexstring = (
            "08 00 32 10"
            " 08 00 00 00"
        )
        assert b'\x08\x00\x32\x10\x08\x00\x00\x00' == hex2bytes(hexstring)

    def test_odd_digits_raises(self):
        with pytest.raises(Error):
            hex2bytes("00 1")

    def test_bytes_to_hex(self):
        """Test utils.hexutil.hex2bytes"""
        hexstring = "00 10 20 30 40 50 60 70 80 90 a0 b0 c0 d0 e0 f0"
        bytestring = (
            b'\x00\x10\x20\x30\x40\x50\x60\x70'
            b'\x80\x90\xA0\xB0\xC0\xD0\xE0\xF0'
        )
        assert hexstring == bytes2hex(bytestring)
        assert '' == bytes2hex(b'')
