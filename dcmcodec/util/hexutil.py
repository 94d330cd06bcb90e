# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Miscellaneous utility routines relating to hex and byte strings"""

from binascii import a2b_hex, b2a_hex
from typing import Union

from dcmcodec.charset import default_encoding


def hex2bytes(hexstring: Union[str, bytes]) -> bytes:
    """Return bytestring for a string of hex bytes separated by whitespace

    This is useful for creating specific byte sequences for testing, using
    python's implied concatenation for strings with comments allowed.

    Examples
    --------

    ::

        hex_string = (
            "08 00 32 10"    # (0008,1032) SQ "Procedure Code Sequence"
            " 08 00 00 00"   # length 8
            " fe ff 00 e0"   # (FFFE,E000) Item Tag
        )
        byte_string = hex2bytes(hex_string)

    Note in the example that all lines except the first must start with a
    space, alternatively the space could end the previous line.
    """
    if isinstance(hexstring, bytes):
        return a2b_hex(b"".join(hexstring.split()))

    return a2b_hex(bytes("".join(hexstring.split()), default_encoding))


def bytes2hex(byte_string: bytes) -> str:
    """Return `byte_string` as space separated pairs of hex digits."""
    s = b2a_hex(byte_string).decode()
    return " ".join(s[i:i + 2] for i in range(0, len(s), 2))
