# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Handle alternate character sets for character strings.

Only single-byte and stand-alone character sets are supported; ISO 2022
code extension escape sequences are decoded with the first encoding.
"""
import re
from typing import List, Sequence, Union
import warnings


# default encoding if no encoding defined - corresponds to ISO IR 6 / ASCII
default_encoding = "iso8859"

# Map DICOM Specific Character Set to python equivalent
python_encoding = {
    '': default_encoding,
    'ISO_IR 6': default_encoding,
    'ISO_IR 13': 'shift_jis',
    'ISO_IR 100': 'latin_1',
    'ISO_IR 101': 'iso8859_2',
    'ISO_IR 109': 'iso8859_3',
    'ISO_IR 110': 'iso8859_4',
    'ISO_IR 126': 'iso_ir_126',  # Greek
    'ISO_IR 127': 'iso_ir_127',  # Arabic
    'ISO_IR 138': 'iso_ir_138',  # Hebrew
    'ISO_IR 144': 'iso_ir_144',  # Russian
    'ISO_IR 148': 'iso_ir_148',  # Turkish
    'ISO_IR 166': 'iso_ir_166',  # Thai
    'ISO 2022 IR 6': 'iso8859',
    'ISO 2022 IR 13': 'shift_jis',
    'ISO 2022 IR 87': 'iso2022_jp',
    'ISO 2022 IR 100': 'latin_1',
    'ISO 2022 IR 149': 'euc_kr',
    'ISO 2022 IR 159': 'iso-2022-jp',
    'ISO_IR 192': 'UTF8',
    'GB18030': 'GB18030',
    'ISO 2022 GBK': 'GBK',
    'ISO 2022 58': 'GB2312',
    'GBK': 'GBK',
}

# these encodings cannot be used with code extensions
# see DICOM Standard, Part 3, Table C.12-5
STAND_ALONE_ENCODINGS = ('ISO_IR 192', 'GBK', 'GB18030')


def convert_encodings(encodings: Union[str, Sequence[str]]) -> List[str]:
    """Convert DICOM encodings into corresponding python encodings.

    Handles some common spelling mistakes and issues a warning in this case.
    Stand-alone encodings used together with others are reduced to the first
    value, also with a warning.

    Parameters
    ----------
    encodings : str or list of str
        The encodings as read from Specific Character Set.

    Returns
    -------
    list of str
        The list of Python encodings corresponding to the DICOM encodings.
        Unknown values are returned unchanged, assuming that they are already
        Python encodings.
    """
    if isinstance(encodings, str):
        encodings = [encodings]
    encodings = list(encodings) or ['']

    py_encodings = []
    for encoding in encodings:
        encoding = encoding.strip()
        if encoding in python_encoding:
            py_encodings.append(python_encoding[encoding])
            continue

        patched = None
        if re.match('^ISO[^_]IR', encoding) is not None:
            patched = 'ISO_IR' + encoding[6:]
        elif re.match('^(?=ISO.2022.IR.)(?!ISO 2022 IR )', encoding):
            patched = 'ISO 2022 IR ' + encoding[12:]

        if patched in python_encoding:
            warnings.warn(
                f"Incorrect value for Specific Character Set '{encoding}' - "
                f"assuming '{patched}'",
                stacklevel=2
            )
            py_encodings.append(python_encoding[patched])
        else:
            py_encodings.append(encoding)

    if len(encodings) > 1 and encodings[0] in STAND_ALONE_ENCODINGS:
        warnings.warn(
            f"Value '{encodings[0]}' for Specific Character Set does not "
            f"allow code extensions, ignoring: {', '.join(encodings[1:])}",
            stacklevel=2
        )
        py_encodings = py_encodings[:1]

    return py_encodings


def decode_bytes(value: bytes, encodings: Sequence[str]) -> str:
    """Return `value` decoded with the first usable python encoding.

    Undecodable bytes are replaced rather than raising, as the value is
    only used for display.
    """
    for encoding in encodings:
        try:
            return value.decode(encoding)
        except (LookupError, UnicodeDecodeError):
            continue

    return value.decode(default_encoding, errors='replace')


def encode_string(value: str, encodings: Sequence[str]) -> bytes:
    """Return `value` encoded with the first python encoding that can.

    Raises
    ------
    UnicodeEncodeError
        If none of the encodings can represent `value`.
    """
    encodings = list(encodings) or [default_encoding]
    for encoding in encodings[:-1]:
        try:
            return value.encode(encoding)
        except (LookupError, UnicodeEncodeError):
            continue

    return value.encode(encodings[-1])
