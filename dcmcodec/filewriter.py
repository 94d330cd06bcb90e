# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Functions related to writing DICOM data.

Like the reader, nested sequences are written with an explicit stack of
frames. Defined lengths of sequences and items are filled in once their
contents have been written.
"""

import os
from struct import pack
from typing import (
    BinaryIO, Iterator, List, Optional, Union, cast
)
import zlib

from dcmcodec.config import logger
from dcmcodec.dataelem import DataElement, UNDEFINED_LENGTH
from dcmcodec.dataset import Dataset, DicomDocument, Item
from dcmcodec.errors import (
    InvalidUndefinedLengthError, LengthOverflowError,
    MissingTransferSyntaxError
)
from dcmcodec.filebase import DicomIO, DicomBytesIO, DicomFileLike
from dcmcodec.sequence import Sequence
from dcmcodec.tag import (
    ItemTag, ItemDelimiterTag, SequenceDelimiterTag,
    FileMetaInformationGroupLengthTag, TransferSyntaxUIDTag, Tag
)
from dcmcodec.uid import TransferSyntax
from dcmcodec.vr import VR, EXPLICIT_VR_LENGTH_32, FIXED_SIZE_VR


PathType = Union[str, "os.PathLike[str]"]

# (0002,0001) File Meta Information Version
FILE_META_VERSION = b'\x00\x01'

# the largest defined length of a 4 byte length field
MAX_DEFINED_LENGTH = 0xFFFFFFFE

# width of the units that are byte swapped when changing endianness
SWAP_SIZE = {
    VR_: 2 if VR_ is VR.AT else size for VR_, size in FIXED_SIZE_VR.items()
}


class _ElementsFrame:
    """Elements still to be written for a data set or an item."""
    __slots__ = (
        'entries', 'is_implicit_VR', 'is_little_endian', 'item',
        'length_pos'
    )

    def __init__(
        self,
        entries: Iterator[DataElement],
        is_implicit_VR: bool,
        is_little_endian: bool,
        item: Optional[Item] = None,
        length_pos: Optional[int] = None,
    ) -> None:
        self.entries = entries
        self.is_implicit_VR = is_implicit_VR
        self.is_little_endian = is_little_endian
        self.item = item
        # location of the item's length field, None for a data set
        self.length_pos = length_pos


class _ItemsFrame:
    """Items still to be written for a sequence or encapsulated value."""
    __slots__ = (
        'entries', 'element', 'is_implicit_VR', 'is_little_endian',
        'header_little_endian', 'is_undefined_length', 'length_pos',
        'is_fragments'
    )

    def __init__(
        self,
        entries: Iterator[Item],
        element: DataElement,
        is_implicit_VR: bool,
        is_little_endian: bool,
        header_little_endian: bool,
        is_undefined_length: bool,
        length_pos: int,
        is_fragments: bool,
    ) -> None:
        self.entries = entries
        self.element = element
        # encoding of the items
        self.is_implicit_VR = is_implicit_VR
        self.is_little_endian = is_little_endian
        # encoding of the element's own length field
        self.header_little_endian = header_little_endian
        self.is_undefined_length = is_undefined_length
        self.length_pos = length_pos
        self.is_fragments = is_fragments


def _patch_length(
    fp: DicomIO, length_pos: int, is_little_endian: bool, tag: object
) -> None:
    """Write the number of bytes after the length field at `length_pos`."""
    end = fp.tell()
    length = end - length_pos - 4
    if length > MAX_DEFINED_LENGTH:
        raise LengthOverflowError(
            f"Encoded length {length} of {tag} is too long for a defined "
            "length"
        )

    fp.seek(length_pos)
    fp.write(pack('<L' if is_little_endian else '>L', length))
    fp.seek(end)


def _byteswap(value: bytes, size: int) -> bytes:
    """Return `value` with the byte order of each `size` byte unit reversed.
    """
    swapped = bytearray(len(value))
    for idx in range(size):
        swapped[idx::size] = value[size - 1 - idx::size]

    return bytes(swapped)


def _write_header(
    fp: DicomIO, elem: DataElement, is_implicit_VR: bool, length: int
) -> None:
    fp.write_tag(elem.tag)
    if is_implicit_VR:
        fp.write_UL(length)
        return

    fp.write(elem.VR.value.encode('ascii'))
    if elem.VR in EXPLICIT_VR_LENGTH_32:
        fp.write(b'\x00\x00')  # reserved
        fp.write_UL(length)
    else:
        fp.write_US(length)


def _write_value_element(
    fp: DicomIO, elem: DataElement, is_implicit_VR: bool
) -> None:
    """Write a non-sequence element with its header."""
    value = cast(bytes, elem.value)
    if elem.is_undefined_length:
        if not elem.VR.allows_undefined_length:
            raise InvalidUndefinedLengthError(
                f"Undefined length can't be used with VR {elem.VR} for "
                f"{elem.tag}"
            )
        # the value must already end with its own delimiter
        _write_header(fp, elem, is_implicit_VR, UNDEFINED_LENGTH)
        fp.write(value)
        return

    size = SWAP_SIZE.get(elem.VR)
    if size and elem.is_little_endian != fp.is_little_endian:
        if len(value) % size:
            logger.warning(
                f"Unable to change the byte order of {elem.tag}, its length "
                f"isn't a multiple of {size}"
            )
        else:
            value = _byteswap(value, size)

    if len(value) % 2:
        if elem.VR.is_padded:
            value += elem.padding[:1] or b'\x00'
        else:
            logger.warning(
                f"Writing the odd length value of {elem.tag} with VR "
                f"{elem.VR} without padding"
            )

    max_length = elem.VR.max_length(is_implicit_VR)
    if len(value) > max_length:
        raise LengthOverflowError(
            f"The value of {elem.tag} is {len(value)} bytes long, more than "
            f"the maximum of {max_length} for VR {elem.VR}"
        )

    _write_header(fp, elem, is_implicit_VR, len(value))
    fp.write(value)


class _Encoder:
    """Write elements to `fp` with an explicit stack of frames."""
    def __init__(self, fp: DicomIO) -> None:
        self.fp = fp
        self.stack: List[Union[_ElementsFrame, _ItemsFrame]] = []

    def run(
        self,
        frame: Union[_ElementsFrame, _ItemsFrame],
        finish_root: bool = True
    ) -> None:
        fp = self.fp
        root = frame
        self.stack = [frame]
        while self.stack:
            frame = self.stack[-1]
            fp.is_little_endian = frame.is_little_endian
            entry = next(frame.entries, None)
            if entry is None:
                self.stack.pop()
                if frame is not root or finish_root:
                    self._finish(frame)
            elif isinstance(frame, _ElementsFrame):
                self._write_element(cast(DataElement, entry), frame)
            else:
                self._write_item(cast(Item, entry), frame)

    def _write_element(
        self, elem: DataElement, frame: _ElementsFrame
    ) -> None:
        if not elem.is_sequence:
            _write_value_element(self.fp, elem, frame.is_implicit_VR)
            return

        fp = self.fp
        seq = cast(Sequence, elem.value)
        is_fragments = seq.is_fragments
        if is_fragments and elem.VR not in (VR.OB, VR.OW, VR.UN):
            raise InvalidUndefinedLengthError(
                f"Encapsulated data can't be used with VR {elem.VR} for "
                f"{elem.tag}"
            )
        if not is_fragments and elem.VR not in (VR.SQ, VR.UN):
            raise TypeError(
                f"{elem.tag} has VR {elem.VR} but a value of sequence items"
            )

        # Part 5, Section 6.2.2: UN sequences always use undefined length
        is_undefined_length = (
            is_fragments or elem.VR is VR.UN or elem.is_undefined_length
            or seq.is_undefined_length
        )
        is_implicit_VR = frame.is_implicit_VR
        is_little_endian = frame.is_little_endian
        if elem.VR is VR.UN and not is_fragments:
            # Part 5, Section 6.2.2
            is_implicit_VR = True
            is_little_endian = True

        _write_header(fp, elem, frame.is_implicit_VR, UNDEFINED_LENGTH)
        length_pos = fp.tell() - 4
        self.stack.append(
            _ItemsFrame(
                iter(list(seq)), elem, is_implicit_VR, is_little_endian,
                frame.is_little_endian, is_undefined_length, length_pos,
                is_fragments
            )
        )

    def _write_item(self, item: Item, frame: _ItemsFrame) -> None:
        fp = self.fp
        fp.write_tag(ItemTag)
        if frame.is_fragments:
            if not item.is_fragment:
                raise TypeError(
                    f"Encapsulated data in {frame.element.tag} must only "
                    "contain fragment items"
                )
            fragment = cast(bytes, item.fragment)
            if len(fragment) % 2:
                fragment += b'\x00'
            if len(fragment) > MAX_DEFINED_LENGTH:
                raise LengthOverflowError(
                    f"Fragment in {frame.element.tag} is too long"
                )
            fp.write_UL(len(fragment))
            fp.write(fragment)
            return

        if item.is_fragment:
            raise TypeError(
                f"The sequence {frame.element.tag} can't contain fragments"
            )

        length_pos = fp.tell()
        fp.write_UL(UNDEFINED_LENGTH)
        self.stack.append(
            _ElementsFrame(
                iter(item.sorted_elements()), frame.is_implicit_VR,
                frame.is_little_endian, item=item,
                length_pos=None if item.is_undefined_length else length_pos
            )
        )

    def _finish(self, frame: Union[_ElementsFrame, _ItemsFrame]) -> None:
        fp = self.fp
        if isinstance(frame, _ItemsFrame):
            if frame.is_undefined_length:
                fp.write_tag(SequenceDelimiterTag)
                fp.write_UL(0)
            else:
                _patch_length(
                    fp, frame.length_pos, frame.header_little_endian,
                    frame.element.tag
                )
            return

        if frame.item is None:
            return

        if frame.length_pos is None:
            fp.write_tag(ItemDelimiterTag)
            fp.write_UL(0)
        else:
            _patch_length(fp, frame.length_pos, frame.is_little_endian, "item")


def _as_dicom_io(
    fp: Union[DicomIO, BinaryIO], is_implicit_VR: bool, is_little_endian: bool
) -> DicomIO:
    if not isinstance(fp, DicomIO):
        fp = DicomFileLike(fp)
    fp.is_implicit_VR = is_implicit_VR
    fp.is_little_endian = is_little_endian

    return fp


def write_data_element(
    fp: Union[DicomIO, BinaryIO],
    elem: DataElement,
    is_implicit_VR: bool = False,
    is_little_endian: bool = True,
) -> None:
    """Write the element `elem` to the file-like `fp`.

    Odd length values of VRs that require it are padded with the element's
    :attr:`~dcmcodec.dataelem.DataElement.padding` byte, which is counted in
    the length field. Sequences are written with all of their items.

    Parameters
    ----------
    fp : file-like
        The file-like to write the encoded data to, must be seekable for
        sequences of defined length.
    elem : dataelem.DataElement
        The element to write.
    is_implicit_VR : bool, optional
        ``True`` to write implicit VR, default ``False``.
    is_little_endian : bool, optional
        ``True`` (default) to write little endian.

    Raises
    ------
    errors.LengthOverflowError
        If the value is too long for the VR's length field.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    _Encoder(fp).run(
        _ElementsFrame(iter([elem]), is_implicit_VR, is_little_endian)
    )


def write_dataset(
    fp: Union[DicomIO, BinaryIO],
    dataset: Dataset,
    is_implicit_VR: bool = False,
    is_little_endian: bool = True,
) -> int:
    """Write the elements of `dataset` to `fp` in tag order.

    Returns
    -------
    int
        The number of bytes written.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    start = fp.tell()
    _Encoder(fp).run(
        _ElementsFrame(
            iter(dataset.sorted_elements()), is_implicit_VR, is_little_endian
        )
    )
    return fp.tell() - start


def write_sequence_item(
    fp: Union[DicomIO, BinaryIO],
    item: Item,
    is_implicit_VR: bool = False,
    is_little_endian: bool = True,
) -> None:
    """Write a single sequence `item` to the file-like `fp`.

    This is similar to writing a data element, but with the Item tag and,
    for an undefined length item, a trailing Item Delimitation Item.

    See DICOM Standard, Part 5, :dcm:`Section 7.5<sect_7.5.html>`.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    holder = DataElement(0xFFFFFFFF, VR.SQ, Sequence())
    _Encoder(fp).run(
        _ItemsFrame(
            iter([item]), holder, is_implicit_VR, is_little_endian,
            is_little_endian, False, 0, False
        ),
        finish_root=False
    )


def write_sequence(
    fp: Union[DicomIO, BinaryIO],
    elem: DataElement,
    is_implicit_VR: bool = False,
    is_little_endian: bool = True,
) -> None:
    """Write the sequence element `elem` with all of its items.

    Sequences (and items) with an undefined length are closed by delimiter
    items, those with a defined length have the encoded length of their
    items written in their length field.
    """
    if not elem.is_sequence:
        raise TypeError(f"{elem.tag} is not a sequence")

    write_data_element(fp, elem, is_implicit_VR, is_little_endian)


def encode_element(
    elem: DataElement,
    is_implicit_VR: bool = False,
    is_little_endian: bool = True,
) -> bytes:
    """Return the encoded bytes of `elem`, see :func:`write_data_element`.
    """
    fp = DicomBytesIO()
    write_data_element(fp, elem, is_implicit_VR, is_little_endian)
    return fp.getvalue()


def write_file_meta_info(
    fp: Union[DicomIO, BinaryIO],
    file_meta: Dataset,
    enforce_standard: bool = True,
) -> None:
    """Write the File Meta Information elements in `file_meta` to `fp`.

    The (0002,0000) *File Meta Information Group Length* is always written
    first and its value set to the number of bytes in the rest of the group.
    The meta group is always encoded as explicit VR little endian.

    Parameters
    ----------
    fp : file-like
        The file-like to write the File Meta Information to.
    file_meta : dataset.Dataset
        The File Meta Information elements, updated in place with the
        group length and, if `enforce_standard` is ``True``, the version.
    enforce_standard : bool, optional
        If ``True`` (default) add (0002,0001) *File Meta Information
        Version* when missing and require (0002,0010) *Transfer Syntax UID*.

    Raises
    ------
    ValueError
        If any non-group 0x0002 elements are in `file_meta`.
    errors.MissingTransferSyntaxError
        If `enforce_standard` is ``True`` and there is no transfer syntax.
    """
    bad = [elem.tag for elem in file_meta if elem.tag.group != 0x0002]
    if bad:
        raise ValueError(
            "Only File Meta Information group (0002,eeee) elements may be "
            f"present in 'file_meta', found {', '.join(map(str, bad))}"
        )

    if enforce_standard:
        if Tag(0x00020001) not in file_meta:
            file_meta.add(DataElement(0x00020001, VR.OB, FILE_META_VERSION))

        if TransferSyntaxUIDTag not in file_meta:
            raise MissingTransferSyntaxError()

    buffer = DicomBytesIO()
    if FileMetaInformationGroupLengthTag in file_meta:
        del file_meta[FileMetaInformationGroupLengthTag]
    file_meta.add(
        DataElement(FileMetaInformationGroupLengthTag, VR.UL, b'\x00' * 4)
    )
    write_dataset(buffer, file_meta, False, True)

    # the group length element is 12 bytes when explicit VR
    group_length = buffer.tell() - 12
    file_meta[FileMetaInformationGroupLengthTag].value = pack(
        '<L', group_length
    )
    buffer.seek(8)
    buffer.write_UL(group_length)

    fp.write(buffer.getvalue())


def encode_document(document: DicomDocument) -> bytes:
    """Return `document` encoded as a DICOM Part 10 byte string.

    The main data set is encoded with the transfer syntax given by the
    (0002,0010) *Transfer Syntax UID* of the file meta information. The
    group length and version are added to a copy of the file meta
    information, `document` is only updated with the transfer syntax and
    only once encoding succeeds.

    Raises
    ------
    errors.MissingTransferSyntaxError
        If the file meta information has no transfer syntax.
    errors.LengthOverflowError
        If any value is too long for its VR.
    """
    elem = document.file_meta.get(TransferSyntaxUIDTag)
    if elem is None:
        raise MissingTransferSyntaxError()

    transfer_syntax = TransferSyntax.from_uid(elem.python_value() or '')

    preamble = document.preamble
    if preamble is None:
        preamble = b'\x00' * 128
    if len(preamble) != 128:
        raise ValueError("'preamble' must be 128-bytes long")

    fp = DicomBytesIO()
    fp.write(preamble)
    fp.write(b'DICM')
    write_file_meta_info(fp, Dataset(document.file_meta.elements()))

    if transfer_syntax.is_deflated:
        buffer = DicomBytesIO()
        write_dataset(buffer, document.dataset, False, True)
        # Part 5, Annex A.5: raw deflate, no zlib header
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        deflated = compressor.compress(buffer.getvalue())
        deflated += compressor.flush()
        if len(deflated) % 2:
            deflated += b'\x00'
        fp.write(deflated)
    else:
        write_dataset(
            fp,
            document.dataset,
            transfer_syntax.is_implicit_VR,
            transfer_syntax.is_little_endian,
        )

    document.transfer_syntax = transfer_syntax
    return fp.getvalue()


def dcmwrite(
    filename: Union[PathType, BinaryIO], document: DicomDocument
) -> int:
    """Write `document` to `filename` as a DICOM Part 10 file.

    The whole document is encoded in memory first so that nothing is written
    if encoding fails.

    Parameters
    ----------
    filename : str or PathLike or file-like
        Name of file or the file-like to write the new DICOM file to.
    document : dataset.DicomDocument
        The document to write.

    Returns
    -------
    int
        The number of bytes written.
    """
    data = encode_document(document)
    if isinstance(filename, (str, os.PathLike)):
        with open(filename, 'wb') as f:
            f.write(data)
    else:
        filename.write(data)

    return len(data)
