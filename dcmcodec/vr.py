# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Value Representation (VR) configuration.

The VR of an element decides its binary grammar: the width of its length
field in explicit VR streams, whether odd length values are padded, whether
it may use an undefined length and whether its value is a container of
items rather than bytes.
"""

from enum import Enum, unique
from typing import Optional


@unique
class VR(str, Enum):
    """DICOM Data Element's Value Representation (VR)"""
    # Standard VRs from Table 6.2-1 in Part 5
    AE = "AE"
    AS = "AS"
    AT = "AT"
    CS = "CS"
    DA = "DA"
    DS = "DS"
    DT = "DT"
    FD = "FD"
    FL = "FL"
    IS = "IS"
    LO = "LO"
    LT = "LT"
    OB = "OB"
    OD = "OD"
    OF = "OF"
    OL = "OL"
    OW = "OW"
    OV = "OV"
    PN = "PN"
    SH = "SH"
    SL = "SL"
    SQ = "SQ"
    SS = "SS"
    ST = "ST"
    SV = "SV"
    TM = "TM"
    UC = "UC"
    UI = "UI"
    UL = "UL"
    UN = "UN"
    UR = "UR"
    US = "US"
    UT = "UT"
    UV = "UV"

    def __str__(self) -> str:
        return str.__str__(self)

    @property
    def is_binary(self) -> bool:
        """Return ``True`` if the value is binary data rather than text."""
        return self not in STR_VR and self is not VR.SQ

    @property
    def is_string(self) -> bool:
        """Return ``True`` if the value is (possibly multi-valued) text."""
        return self in STR_VR

    @property
    def is_container(self) -> bool:
        """Return ``True`` if the value is a list of items."""
        return self is VR.SQ

    @property
    def is_padded(self) -> bool:
        """Return ``True`` if odd length values need a trailing pad byte."""
        return self in PADDED_VR

    @property
    def allows_undefined_length(self) -> bool:
        """Return ``True`` if a length of 0xFFFFFFFF is legal for the VR."""
        return self in UNDEFINED_LENGTH_VR

    @property
    def value_size(self) -> Optional[int]:
        """Return the size of a single value for fixed width VRs."""
        return FIXED_SIZE_VR.get(self)

    def length_field_size(self, is_implicit_VR: bool = False) -> int:
        """Return the width in bytes of the element's length field.

        Parameters
        ----------
        is_implicit_VR : bool, optional
            ``True`` if the element is encoded as implicit VR, in which case
            the length field is always 4 bytes.
        """
        if is_implicit_VR or self in EXPLICIT_VR_LENGTH_32:
            return 4

        return 2

    def max_length(self, is_implicit_VR: bool = False) -> int:
        """Return the largest defined length the length field can hold."""
        if self.length_field_size(is_implicit_VR) == 2:
            return 0xFFFF

        # 0xFFFFFFFF is reserved for undefined length
        return 0xFFFFFFFE

    def header_length(self, is_implicit_VR: bool = False) -> int:
        """Return the number of bytes in an element header using this VR."""
        if not is_implicit_VR and self in EXPLICIT_VR_LENGTH_32:
            return 12

        return 8


STANDARD_VR = set(VR)

BYTES_VR = {VR.OB, VR.OD, VR.OF, VR.OL, VR.OV, VR.OW, VR.UN}
FLOAT_VR = {VR.DS, VR.FD, VR.FL}
INT_VR = {VR.AT, VR.IS, VR.SL, VR.SS, VR.SV, VR.UL, VR.US, VR.UV}
LIST_VR = {VR.SQ}
STR_VR = {
    VR.AE, VR.AS, VR.CS, VR.DA, VR.DS, VR.DT, VR.IS, VR.LO, VR.LT, VR.PN,
    VR.SH, VR.ST, VR.TM, VR.UC, VR.UI, VR.UR, VR.UT,
}

_missing = ", ".join(
    sorted(STANDARD_VR - (BYTES_VR | FLOAT_VR | INT_VR | LIST_VR | STR_VR))
)
if _missing:
    raise RuntimeError(f"Corresponding Python built-in missing for {_missing}")


# VRs that use 2 byte length fields for Explicit VR from Table 7.1-2 in Part 5
#   All other explicit VRs and all implicit VRs use 4 byte length fields
EXPLICIT_VR_LENGTH_16 = {
    VR.AE, VR.AS, VR.AT, VR.CS, VR.DA, VR.DS, VR.DT, VR.FL, VR.FD, VR.IS,
    VR.LO, VR.LT, VR.PN, VR.SH, VR.SL, VR.SS, VR.ST, VR.TM, VR.UI, VR.UL,
    VR.US,
}
EXPLICIT_VR_LENGTH_32 = STANDARD_VR - EXPLICIT_VR_LENGTH_16

# Values must have even length, Part 5 Section 7.1.1
PADDED_VR = STR_VR | {VR.OB, VR.UN}

# Undefined length is allowed for sequences and encapsulated or streamed
#   binary data, Part 5 Sections 7.1.2, 7.5 and A.4
UNDEFINED_LENGTH_VR = {VR.SQ, VR.OB, VR.OW, VR.UN}

# Single value size of the fixed width binary VRs
FIXED_SIZE_VR = {
    VR.AT: 4, VR.FD: 8, VR.FL: 4, VR.OD: 8, VR.OF: 4, VR.OL: 4, VR.OV: 8,
    VR.OW: 2, VR.SL: 4, VR.SS: 2, VR.SV: 8, VR.UL: 4, VR.US: 2, VR.UV: 8,
}


def lookup_vr(code: str) -> Optional[VR]:
    """Return the :class:`VR` for the two character `code` or ``None``."""
    try:
        return VR(code)
    except ValueError:
        return None
