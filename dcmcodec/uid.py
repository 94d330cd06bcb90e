# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Functions for handling DICOM unique identifiers (UIDs) and the transfer
syntax they select.
"""

from dataclasses import dataclass
import re
from typing import Type, TypeVar

from dcmcodec.config import logger


# Regex for a valid UID
RE_VALID_UID = r'^(0|[1-9][0-9]*)(\.(0|[1-9][0-9]*))*$'

_UID = TypeVar("_UID", bound="UID")


class UID(str):
    """Human friendly UIDs as a Python :class:`str` subclass.

    Examples
    --------

    >>> uid = UID('1.2.840.10008.1.2.1')
    >>> uid.name
    'Explicit VR Little Endian'
    >>> uid.is_transfer_syntax
    True
    """
    def __new__(cls: Type[_UID], val: str) -> _UID:
        if isinstance(val, str):
            # UIDs are padded with NULL to even length
            return super().__new__(cls, val.strip().rstrip('\x00'))

        raise TypeError("A UID must be created from a string")

    @property
    def name(self) -> str:
        """Return the UID name, or the UID itself if it isn't known."""
        return UID_dictionary.get(str(self), (str(self), ''))[0]

    @property
    def is_transfer_syntax(self) -> bool:
        """Return ``True`` if a transfer syntax UID."""
        if str(self) in UID_dictionary:
            return UID_dictionary[str(self)][1] == "Transfer Syntax"

        # All registered transfer syntaxes are below 1.2.840.10008.1.2
        return (
            self == '1.2.840.10008.1.2'
            or self.startswith('1.2.840.10008.1.2.')
        )

    @property
    def is_private(self) -> bool:
        """Return ``True`` if the UID isn't an officially registered DICOM
        UID.
        """
        return self[:14] != '1.2.840.10008.'

    @property
    def is_valid(self) -> bool:
        """Return ``True`` if `self` is a valid UID, ``False`` otherwise."""
        return len(self) <= 64 and re.match(RE_VALID_UID, self) is not None


ImplicitVRLittleEndian = UID('1.2.840.10008.1.2')
"""1.2.840.10008.1.2"""
ExplicitVRLittleEndian = UID('1.2.840.10008.1.2.1')
"""1.2.840.10008.1.2.1"""
DeflatedExplicitVRLittleEndian = UID('1.2.840.10008.1.2.1.99')
"""1.2.840.10008.1.2.1.99"""
ExplicitVRBigEndian = UID('1.2.840.10008.1.2.2')
"""1.2.840.10008.1.2.2"""
JPEGBaseline8Bit = UID('1.2.840.10008.1.2.4.50')
"""1.2.840.10008.1.2.4.50"""
JPEGLosslessSV1 = UID('1.2.840.10008.1.2.4.70')
"""1.2.840.10008.1.2.4.70"""
JPEGLSLossless = UID('1.2.840.10008.1.2.4.80')
"""1.2.840.10008.1.2.4.80"""
JPEG2000Lossless = UID('1.2.840.10008.1.2.4.90')
"""1.2.840.10008.1.2.4.90"""
JPEG2000 = UID('1.2.840.10008.1.2.4.91')
"""1.2.840.10008.1.2.4.91"""
RLELossless = UID('1.2.840.10008.1.2.5')
"""1.2.840.10008.1.2.5"""

# {uid: (name, type)}
UID_dictionary = {
    ImplicitVRLittleEndian: ('Implicit VR Little Endian', 'Transfer Syntax'),
    ExplicitVRLittleEndian: ('Explicit VR Little Endian', 'Transfer Syntax'),
    DeflatedExplicitVRLittleEndian: (
        'Deflated Explicit VR Little Endian', 'Transfer Syntax'
    ),
    ExplicitVRBigEndian: ('Explicit VR Big Endian', 'Transfer Syntax'),
    JPEGBaseline8Bit: ('JPEG Baseline (Process 1)', 'Transfer Syntax'),
    JPEGLosslessSV1: (
        'JPEG Lossless, Non-Hierarchical, First-Order Prediction '
        '(Process 14 [Selection Value 1])',
        'Transfer Syntax'
    ),
    JPEGLSLossless: ('JPEG-LS Lossless Image Compression', 'Transfer Syntax'),
    JPEG2000Lossless: (
        'JPEG 2000 Image Compression (Lossless Only)', 'Transfer Syntax'
    ),
    JPEG2000: ('JPEG 2000 Image Compression', 'Transfer Syntax'),
    RLELossless: ('RLE Lossless', 'Transfer Syntax'),
    '1.2.840.10008.5.1.4.1.1.2': ('CT Image Storage', 'SOP Class'),
    '1.2.840.10008.5.1.4.1.1.4': ('MR Image Storage', 'SOP Class'),
    '1.2.840.10008.5.1.4.1.1.7': (
        'Secondary Capture Image Storage', 'SOP Class'
    ),
}


@dataclass(frozen=True)
class TransferSyntax:
    """The encoding used for the main data set of one document.

    Attributes
    ----------
    uid : UID
        The (0002,0010) *Transfer Syntax UID*.
    is_implicit_VR : bool
        ``True`` if element VRs are not written in the data.
    is_little_endian : bool
        ``True`` if multi-byte values are little endian.
    is_deflated : bool
        ``True`` if the data set is compressed with deflate.
    """
    uid: UID
    is_implicit_VR: bool = False
    is_little_endian: bool = True
    is_deflated: bool = False

    @classmethod
    def from_uid(cls, uid: str) -> "TransferSyntax":
        """Return the :class:`TransferSyntax` selected by `uid`.

        Encapsulated (compressed) transfer syntaxes all use explicit VR
        little endian for their elements. Unknown UIDs are treated the same
        way, with a warning.
        """
        uid = UID(uid)
        if uid == ImplicitVRLittleEndian:
            return cls(uid, is_implicit_VR=True)

        if uid == ExplicitVRBigEndian:
            return cls(uid, is_little_endian=False)

        if uid == DeflatedExplicitVRLittleEndian:
            return cls(uid, is_deflated=True)

        if not uid.is_transfer_syntax:
            logger.warning(
                f"Unknown transfer syntax '{uid}', assuming explicit VR "
                "little endian"
            )

        return cls(uid)


def transfer_syntax(uid: str) -> TransferSyntax:
    """Return the :class:`TransferSyntax` for the transfer syntax `uid`."""
    return TransferSyntax.from_uid(uid)
