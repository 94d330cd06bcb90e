# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Functions for converting values of DICOM
   data elements to proper python types and back again
"""

from struct import pack, unpack, calcsize
from typing import Any, List, Optional, Sequence, Union

from dcmcodec.charset import default_encoding, decode_bytes, encode_string
from dcmcodec.config import logger
from dcmcodec.tag import Tag, BaseTag
from dcmcodec.vr import VR, BYTES_VR


# struct formats of the numeric VRs, without the endianness
NUMBER_FORMATS = {
    VR.FD: 'd', VR.FL: 'f', VR.SL: 'l', VR.SS: 'h', VR.SV: 'q',
    VR.UL: 'L', VR.US: 'H', VR.UV: 'Q',
}

# VRs whose value is a single string that may contain backslashes
TEXT_VR = {VR.LT, VR.ST, VR.UT, VR.UR}

# VRs whose value uses the Specific Character Set
CHARSET_VR = {VR.LO, VR.LT, VR.PN, VR.SH, VR.ST, VR.UC, VR.UT}

ValueType = Union[None, str, int, float, bytes, BaseTag, List[Any]]


def _unwrap(value: List[Any]) -> ValueType:
    if not value:
        return None
    if len(value) == 1:
        return value[0]

    return value


def convert_numbers(
    byte_string: bytes, is_little_endian: bool, struct_format: str
) -> ValueType:
    """Return a decoded numerical VR value.

    Parameters
    ----------
    byte_string : bytes
        The encoded numerical VR element value.
    is_little_endian : bool
        ``True`` if the value is encoded as little endian, ``False`` otherwise.
    struct_format : str
        The format of the numerical data encoded in `byte_string`. Should be a
        valid format for :func:`struct.unpack()` without the endianness.

    Returns
    -------
    None, a single value, or a list of values
    """
    endian = '<' if is_little_endian else '>'
    bytes_per_value = calcsize("=" + struct_format)
    length = len(byte_string)
    if length % bytes_per_value != 0:
        logger.warning(
            "Expected length to be even multiple of number size, "
            "ignoring the trailing bytes"
        )
        length -= length % bytes_per_value

    count = length // bytes_per_value
    value = unpack(f"{endian}{count}{struct_format}", byte_string[:length])

    return _unwrap(list(value))


def convert_tags(byte_string: bytes, is_little_endian: bool) -> ValueType:
    """Return the decoded **AT** value as one or more tags."""
    endian = '<' if is_little_endian else '>'
    count = len(byte_string) // 4
    values = unpack(f"{endian}{count * 2}H", byte_string[:count * 4])
    tags = [Tag(values[ii], values[ii + 1]) for ii in range(0, count * 2, 2)]

    return _unwrap(tags)


def convert_string(
    byte_string: bytes, VR_: VR, encodings: Optional[Sequence[str]] = None
) -> ValueType:
    """Return the decoded text value of a string VR.

    Multi-valued VRs are split on the backslash delimiter and leading or
    trailing spaces are removed from each value. Text VRs are returned as a
    single string with only trailing spaces removed.
    """
    if VR_ not in CHARSET_VR:
        encodings = [default_encoding]
    encodings = encodings or [default_encoding]

    text = decode_bytes(byte_string, encodings).rstrip('\x00')
    if VR_ in TEXT_VR:
        return text.rstrip(' ')

    values = [v.strip(' ') for v in text.split('\\')]
    if values == ['']:
        return None

    return _unwrap(values)


def convert_value(
    VR_: VR,
    byte_string: bytes,
    is_little_endian: bool = True,
    encodings: Optional[Sequence[str]] = None,
) -> ValueType:
    """Return the python value for the raw `byte_string` of an element.

    Parameters
    ----------
    VR_ : VR
        The element's VR, must not be **SQ**.
    byte_string : bytes
        The raw value bytes, without any header.
    is_little_endian : bool, optional
        The byte order of numeric values, default ``True``.
    encodings : list of str, optional
        The python encodings for the character set dependent string VRs.

    Returns
    -------
    None, str, int, float, bytes, BaseTag or list
        ``None`` for an empty value, a single value or a list for multi-valued
        elements. Binary VRs are returned unchanged as :class:`bytes`.
    """
    VR_ = VR(VR_)
    if VR_ is VR.SQ:
        raise ValueError("Sequence values are not converted from bytes")

    if not byte_string:
        return None

    if VR_ in BYTES_VR:
        return byte_string

    if VR_ is VR.AT:
        return convert_tags(byte_string, is_little_endian)

    if VR_ in NUMBER_FORMATS:
        return convert_numbers(
            byte_string, is_little_endian, NUMBER_FORMATS[VR_]
        )

    return convert_string(byte_string, VR_, encodings)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)

    return [value]


def _format_number(value: Any) -> str:
    if isinstance(value, float):
        return repr(value)

    return str(value)


def encode_value(
    VR_: VR,
    value: Any,
    is_little_endian: bool = True,
    encodings: Optional[Sequence[str]] = None,
) -> bytes:
    """Return the unpadded raw bytes for the python `value` of an element.

    This is the inverse of :func:`convert_value`. Padding to even length is
    left to the element encoder.

    Parameters
    ----------
    VR_ : VR
        The element's VR, must not be **SQ**.
    value : None, str, int, float, bytes or list
        The value to encode, a list for multi-valued elements.
    is_little_endian : bool, optional
        The byte order of numeric values, default ``True``.
    encodings : list of str, optional
        The python encodings for the character set dependent string VRs.
    """
    VR_ = VR(VR_)
    if VR_ is VR.SQ:
        raise ValueError("Sequence values are not encoded as bytes")

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    values = _as_list(value)
    endian = '<' if is_little_endian else '>'
    if VR_ in BYTES_VR:
        if values:
            raise TypeError(f"The value of a {VR_} element must be bytes")
        return b''

    if VR_ is VR.AT:
        tags = [Tag(v) for v in values]
        return b''.join(
            pack(f"{endian}HH", tag.group, tag.element) for tag in tags
        )

    if VR_ in NUMBER_FORMATS:
        return pack(f"{endian}{len(values)}{NUMBER_FORMATS[VR_]}", *values)

    if VR_ not in CHARSET_VR:
        encodings = [default_encoding]
    encodings = encodings or [default_encoding]
    text = '\\'.join(
        v if isinstance(v, str) else _format_number(v) for v in values
    )

    return encode_string(text, encodings)

