# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Tests for dcmcodec.values module."""

import pytest

from dcmcodec.tag import Tag
from dcmcodec.values import (
    convert_numbers, convert_string, convert_tags, convert_value,
    encode_value,
)
from dcmcodec.vr import VR


class TestConvertNumbers:
    def test_single_value(self):
        assert 1 == convert_numbers(b'\x01\x00', True, 'H')
        assert 256 == convert_numbers(b'\x01\x00', False, 'H')

    def test_multi_value(self):
        assert [1, 2] == convert_numbers(b'\x01\x00\x02\x00', True, 'H')

    def test_empty(self):
        assert convert_numbers(b'', True, 'L') is None

    def test_bad_length(self, caplog):
        with caplog.at_level('WARNING', logger='dcmcodec'):
            assert 1 == convert_numbers(b'\x01\x00\x02', True, 'H')

        assert "ignoring the trailing bytes" in caplog.text


class TestConvertTags:
    def test_single(self):
        assert Tag(0x00100020) == convert_tags(b'\x10\x00\x20\x00', True)
        assert Tag(0x00100020) == convert_tags(b'\x00\x10\x00\x20', False)

    def test_multi(self):
        value = convert_tags(b'\x10\x00\x20\x00\x08\x00\x16\x00', True)
        assert [0x00100020, 0x00080016] == value


class TestConvertString:
    def test_multi_value(self):
        assert ['ORIGINAL', 'PRIMARY'] == convert_string(
            b'ORIGINAL\\PRIMARY ', VR.CS
        )

    def test_strip(self):
        assert 'CITIZEN^Joan' == convert_string(b' CITIZEN^Joan ', VR.PN)
        assert '1.2.3' == convert_string(b'1.2.3\x00', VR.UI)

    def test_text_keeps_backslash_and_leading_space(self):
        value = convert_string(b'  some\\text  ', VR.LT)
        assert '  some\\text' == value

    def test_empty(self):
        assert convert_string(b'  ', VR.SH) is None

    def test_encodings(self):
        assert 'Buc^Jérôme' == convert_string(
            b'Buc^J\xe9r\xf4me', VR.PN, ['latin_1']
        )

    def test_encodings_not_used_for_default_vrs(self):
        """Only the character set dependent VRs use the encodings"""
        assert 'ABC' == convert_string(b'ABC', VR.CS, ['utf-16'])


class TestConvertValue:
    @pytest.mark.parametrize(
        'vr, raw, value',
        [
            ('US', b'\x01\x00', 1),
            ('SS', b'\xff\xff', -1),
            ('UL', b'\x01\x00\x00\x00', 1),
            ('SL', b'\xfe\xff\xff\xff', -2),
            ('FL', b'\x00\x00\x80\x3f', 1.0),
            ('FD', b'\x00\x00\x00\x00\x00\x00\xf0\x3f', 1.0),
            ('UV', b'\x02' + b'\x00' * 7, 2),
            ('SV', b'\xff' * 8, -1),
            ('OB', b'\x00\x01', b'\x00\x01'),
            ('UN', b'\x00\x01', b'\x00\x01'),
            ('AS', b'012Y', '012Y'),
            ('IS', b'10\\20', ['10', '20']),
            ('DS', b'1.5 ', '1.5'),
        ]
    )
    def test_convert(self, vr, raw, value):
        assert value == convert_value(vr, raw)

    def test_big_endian(self):
        assert 1 == convert_value(VR.US, b'\x00\x01', False)

    def test_empty(self):
        assert convert_value(VR.US, b'') is None
        assert convert_value(VR.OB, b'') is None

    def test_sequence_raises(self):
        with pytest.raises(ValueError, match="Sequence values"):
            convert_value(VR.SQ, b'')

    def test_unknown_vr_raises(self):
        with pytest.raises(ValueError):
            convert_value('XX', b'\x00')


class TestEncodeValue:
    def test_numbers(self):
        assert b'\x01\x00' == encode_value(VR.US, 1)
        assert b'\x00\x01' == encode_value(VR.US, 1, False)
        assert b'\x01\x00\x02\x00' == encode_value(VR.US, [1, 2])
        assert b'' == encode_value(VR.UL, None)

    def test_tags(self):
        assert b'\x10\x00\x20\x00' == encode_value(VR.AT, 0x00100020)
        assert b'\x00\x10\x00\x20' == encode_value(
            VR.AT, ['PatientID'], False
        )

    def test_strings(self):
        assert b'ORIGINAL\\PRIMARY' == encode_value(
            VR.CS, ['ORIGINAL', 'PRIMARY']
        )
        assert b'1.5\\2' == encode_value(VR.DS, [1.5, 2])
        assert b'' == encode_value(VR.LO, None)

    def test_encodings(self):
        assert b'Buc^J\xe9r\xf4me' == encode_value(
            VR.PN, 'Buc^Jérôme', encodings=['latin_1']
        )

    def test_bytes_unchanged(self):
        assert b'\x00\x01\x02' == encode_value(VR.OB, b'\x00\x01\x02')
        assert b'\x00\x01' == encode_value(VR.US, bytearray(b'\x00\x01'))

    def test_binary_needs_bytes(self):
        with pytest.raises(TypeError, match="must be bytes"):
            encode_value(VR.OW, [1, 2])

    def test_sequence_raises(self):
        with pytest.raises(ValueError, match="Sequence values"):
            encode_value(VR.SQ, [])

    def test_inverse(self):
        raw = encode_value(VR.FD, [1.25, -2.5], False)
        assert [1.25, -2.5] == convert_value(VR.FD, raw, False)
