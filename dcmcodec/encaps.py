# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Functions for working with encapsulated (fragmented) values.

An encapsulated value is an undefined length **OB** or **OW** element whose
value is a series of items holding raw fragments, closed by a Sequence
Delimitation Item. See DICOM Standard Part 5, Section 7.5 and Annex A.4.
"""
from struct import pack
from typing import Iterable, Iterator, Union

from dcmcodec.dataelem import DataElement, UNDEFINED_LENGTH
from dcmcodec.dataset import Item
from dcmcodec.errors import (
    InvalidUndefinedLengthError, TruncatedStreamError, UnexpectedTagError
)
from dcmcodec.filebase import DicomIO, DicomBytesIO
from dcmcodec.sequence import Sequence
from dcmcodec.tag import ItemTag, SequenceDelimiterTag, TagType
from dcmcodec.vr import VR


def itemise_fragment(fragment: bytes, is_little_endian: bool = True) -> bytes:
    """Return an itemised `fragment`.

    Each fragment is encapsulated as a DICOM Item with tag (FFFE,E000), then
    a 4 byte length. Odd length fragments are padded with ``0x00``.
    """
    if len(fragment) % 2:
        fragment += b'\x00'

    endian = '<' if is_little_endian else '>'
    return pack(f'{endian}HHL', 0xFFFE, 0xE000, len(fragment)) + fragment


def encapsulate_fragments(
    fragments: Iterable[bytes], is_little_endian: bool = True
) -> bytes:
    """Return the itemised `fragments` followed by a Sequence Delimitation
    Item.

    The result is suitable as the value of an undefined length element
    whose value is written verbatim.
    """
    output = bytearray()
    for fragment in fragments:
        output.extend(itemise_fragment(fragment, is_little_endian))

    endian = '<' if is_little_endian else '>'
    output.extend(pack(f'{endian}HHL', 0xFFFE, 0xE0DD, 0))
    return bytes(output)


def generate_fragments(
    fp: Union[DicomIO, bytes], is_little_endian: bool = True
) -> Iterator[bytes]:
    """Yield the fragments of an encapsulated value.

    Parameters
    ----------
    fp : filebase.DicomIO or bytes
        The encoded items, positioned at the first Item tag. Reading stops
        after the Sequence Delimitation Item or at the end of the data.
    is_little_endian : bool, optional
        The byte order of the item headers, default ``True``.

    Yields
    ------
    bytes
        The raw bytes of each fragment, including any padding.

    Raises
    ------
    errors.InvalidUndefinedLengthError
        If a fragment item has an undefined length.
    errors.UnexpectedTagError
        If something other than an item or delimiter is found.
    """
    if isinstance(fp, (bytes, bytearray)):
        fp = DicomBytesIO(bytes(fp))
    fp.is_little_endian = is_little_endian

    size = fp.size
    while fp.tell() < size:
        offset = fp.tell()
        tag = fp.read_tag()
        length = fp.read_UL()
        if tag == SequenceDelimiterTag:
            return

        if tag != ItemTag:
            raise UnexpectedTagError(
                f"Unexpected tag {tag} when parsing encapsulated fragments",
                offset=offset
            )

        if length == UNDEFINED_LENGTH:
            raise InvalidUndefinedLengthError(
                "Undefined item length when parsing encapsulated fragments",
                offset=offset
            )

        yield fp.read(length, need_exact_length=True)

    raise TruncatedStreamError(
        "End of data reached before the Sequence Delimitation Item",
        offset=fp.tell()
    )


def fragments_to_sequence(fragments: Iterable[bytes]) -> Sequence:
    """Return a :class:`~dcmcodec.sequence.Sequence` of fragment items."""
    return Sequence(
        (Item.from_fragment(fragment) for fragment in fragments),
        is_undefined_length=True,
        is_fragments=True,
    )


def encapsulated_element(
    tag: TagType, fragments: Iterable[bytes], VR_: Union[str, VR] = VR.OB
) -> DataElement:
    """Return an undefined length element holding `fragments`.

    Examples
    --------

    >>> elem = encapsulated_element('PixelData', [b'\\x00\\x01', b'\\x02'])
    >>> elem.is_fragmented
    True
    """
    return DataElement(
        tag, VR_, fragments_to_sequence(fragments),
        length=UNDEFINED_LENGTH, is_undefined_length=True
    )
