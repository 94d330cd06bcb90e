# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Tests for the dcmcodec.vr module."""

import pytest

from dcmcodec.vr import (
    VR, STANDARD_VR, EXPLICIT_VR_LENGTH_16, EXPLICIT_VR_LENGTH_32, lookup_vr
)


@pytest.mark.parametrize(
    'vr', ['OB', 'OD', 'OF', 'OL', 'OV', 'OW', 'SQ', 'SV', 'UC', 'UN', 'UR',
           'UT', 'UV']
)
def test_long_form_vrs(vr):
    """VRs with a reserved field and 4 byte length in explicit VR"""
    assert VR(vr) in EXPLICIT_VR_LENGTH_32
    assert 4 == VR(vr).length_field_size()
    assert 12 == VR(vr).header_length()
    assert 0xFFFFFFFE == VR(vr).max_length()


def test_short_form_vrs():
    assert 21 == len(EXPLICIT_VR_LENGTH_16)
    assert STANDARD_VR == EXPLICIT_VR_LENGTH_16 | EXPLICIT_VR_LENGTH_32
    for vr in EXPLICIT_VR_LENGTH_16:
        assert 2 == vr.length_field_size()
        assert 8 == vr.header_length()
        assert 0xFFFF == vr.max_length()


def test_implicit_vr_lengths():
    """Implicit VR always uses an 8 byte header with a 4 byte length"""
    for vr in STANDARD_VR:
        assert 4 == vr.length_field_size(is_implicit_VR=True)
        assert 8 == vr.header_length(is_implicit_VR=True)
        assert 0xFFFFFFFE == vr.max_length(is_implicit_VR=True)


def test_str():
    assert 'PN' == str(VR.PN)
    assert 'PN' == f"{VR.PN}"
    assert VR.PN == 'PN'


def test_kinds():
    assert VR.PN.is_string
    assert not VR.PN.is_binary
    assert VR.OB.is_binary
    assert VR.US.is_binary
    assert VR.SQ.is_container
    assert not VR.SQ.is_binary
    assert not VR.SQ.is_string


def test_padded():
    """String VRs, OB and UN are padded to even length"""
    assert VR.LT.is_padded
    assert VR.UI.is_padded
    assert VR.OB.is_padded
    assert VR.UN.is_padded
    assert not VR.OW.is_padded
    assert not VR.US.is_padded


def test_undefined_length():
    allowed = {vr for vr in STANDARD_VR if vr.allows_undefined_length}
    assert {VR.SQ, VR.OB, VR.OW, VR.UN} == allowed


def test_value_size():
    assert 2 == VR.US.value_size
    assert 4 == VR.AT.value_size
    assert 8 == VR.FD.value_size
    assert VR.PN.value_size is None


def test_lookup_vr():
    assert VR.AS is lookup_vr('AS')
    assert lookup_vr('XX') is None
    assert lookup_vr('\x00\x00') is None
