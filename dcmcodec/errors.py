# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Module for dcmcodec exception classes.

Every failure raised by the codec is a subclass of :class:`DicomError` and
carries a :class:`ErrorKind` plus the byte offset at which it was detected,
so callers can branch on ``exc.kind`` rather than on message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """The closed set of codec failure classes."""
    NOT_A_DICOM_FILE = "NotADicomFile"
    TRUNCATED_STREAM = "TruncatedStream"
    UNRECOGNIZED_VR = "UnrecognizedVR"
    INVALID_UNDEFINED_LENGTH = "InvalidUndefinedLength"
    LENGTH_OVERFLOW = "LengthOverflow"
    MISSING_TRANSFER_SYNTAX = "MissingTransferSyntax"
    MISSING_MAGIC = "MissingMagic"
    NESTING_TOO_DEEP = "NestingTooDeep"
    UNEXPECTED_TAG = "UnexpectedTag"


class DicomError(Exception):
    """Base class for all errors raised while encoding or decoding.

    Attributes
    ----------
    kind : ErrorKind
        The classification of the failure.
    offset : int or None
        The byte offset in the stream where the problem was detected, or
        ``None`` if the error did not arise from a stream position.
    """
    kind: ErrorKind
    default_message = "The DICOM data could not be processed"
    #: ``True`` if a batch caller would normally skip rather than report
    is_recoverable = False

    def __init__(self, msg: Optional[str] = None,
                 offset: Optional[int] = None) -> None:
        self.offset = offset
        msg = msg or self.default_message
        if offset is not None:
            msg = f"{msg} (at offset 0x{offset:X})"

        super().__init__(msg)


class NotADicomFileError(DicomError):
    """Raised when the stream is not a DICOM Part 10 file at all.

    Usually raised when the ``DICM`` prefix is not present at position 128
    in the file. Batch callers typically skip such files.
    """
    kind = ErrorKind.NOT_A_DICOM_FILE
    default_message = "The specified file is not a valid DICOM file"
    is_recoverable = True


class TruncatedStreamError(DicomError):
    """Raised when a declared length or delimiter search runs past the end
    of the available bytes.
    """
    kind = ErrorKind.TRUNCATED_STREAM
    default_message = "Unexpected end of data"


class UnrecognizedVRError(DicomError):
    """Raised in strict mode when an explicit VR code is not a known VR."""
    kind = ErrorKind.UNRECOGNIZED_VR
    default_message = "Unknown value representation"


class InvalidUndefinedLengthError(DicomError):
    """Raised when a length of 0xFFFFFFFF is used with a VR that forbids it.
    """
    kind = ErrorKind.INVALID_UNDEFINED_LENGTH
    default_message = "Undefined length is not allowed for this VR"


class LengthOverflowError(DicomError):
    """Raised at encode time when a value is too long for its length field.
    """
    kind = ErrorKind.LENGTH_OVERFLOW
    default_message = "Value too long for the VR's length field"


class MissingTransferSyntaxError(DicomError):
    """Raised when the file meta group has no (0002,0010) element."""
    kind = ErrorKind.MISSING_TRANSFER_SYNTAX
    default_message = (
        "The file meta information has no Transfer Syntax UID (0002,0010)"
    )


class MissingMagicError(DicomError):
    """Raised when the ``DICM`` magic does not follow the preamble."""
    kind = ErrorKind.MISSING_MAGIC
    default_message = "File is missing the DICOM File Meta Information header"


class NestingTooDeepError(DicomError):
    """Raised when sequences are nested deeper than the configured cap."""
    kind = ErrorKind.NESTING_TOO_DEEP
    default_message = "Sequences are nested too deeply"


class UnexpectedTagError(DicomError):
    """Raised when a sequence contains something other than an item."""
    kind = ErrorKind.UNEXPECTED_TAG
    default_message = "Expected an Item tag"
