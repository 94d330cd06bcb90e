# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Read a dicom media file.

Sequences and items are decoded with an explicit stack of frames rather than
by recursion, so the nesting depth of a data set is only limited by
:attr:`~dcmcodec.config.Settings.max_nesting_depth`.
"""

from io import BytesIO
import os
from typing import (
    BinaryIO, Callable, List, Optional, Tuple, Union, cast
)
import zlib

from dcmcodec import config
from dcmcodec.config import logger, Settings, default_settings
from dcmcodec.dataelem import DataElement, UNDEFINED_LENGTH
from dcmcodec.dataset import Dataset, DicomDocument, Item
from dcmcodec.errors import (
    DicomError, InvalidUndefinedLengthError, MissingMagicError,
    MissingTransferSyntaxError, NestingTooDeepError, NotADicomFileError,
    TruncatedStreamError, UnexpectedTagError, UnrecognizedVRError
)
from dcmcodec.filebase import DicomIO, DicomFileLike
from dcmcodec.sequence import Sequence
from dcmcodec.tag import (
    BaseTag, ItemTag, ItemDelimiterTag, SequenceDelimiterTag,
    FileMetaInformationGroupLengthTag, TransferSyntaxUIDTag, PixelDataTag
)
from dcmcodec.uid import TransferSyntax
from dcmcodec.util.hexutil import bytes2hex
from dcmcodec.vr import VR, EXPLICIT_VR_LENGTH_32, lookup_vr


PathType = Union[str, "os.PathLike[str]"]
StopWhenType = Callable[[BaseTag], bool]

# Trailing bytes stripped from padded values of even length
PADDING_CHARS = (b'\x00', b' ')
BINARY_PADDING_CHARS = (b'\x00',)


class _DatasetFrame:
    """The in-progress decode of a top level data set or of an item."""
    __slots__ = (
        'dataset', 'end', 'bound', 'is_implicit_VR', 'is_little_endian',
        'stop_when', 'remaining'
    )

    def __init__(
        self,
        dataset: Dataset,
        end: Optional[int],
        is_implicit_VR: bool,
        is_little_endian: bool,
        stop_when: Optional[StopWhenType] = None,
        remaining: Optional[int] = None,
        bound: Optional[int] = None,
    ) -> None:
        self.dataset = dataset
        # absolute end offset, or None when closed by an Item Delimitation
        self.end = end
        # end of the nearest enclosing defined length container
        self.bound = end if end is not None else bound
        self.is_implicit_VR = is_implicit_VR
        self.is_little_endian = is_little_endian
        self.stop_when = stop_when
        # number of elements still to read, None for no limit
        self.remaining = remaining

    @property
    def is_item(self) -> bool:
        return isinstance(self.dataset, Item)


class _SequenceFrame:
    """The in-progress decode of the items of a sequence or of the
    fragments of encapsulated data.
    """
    __slots__ = (
        'element', 'end', 'bound', 'is_implicit_VR', 'is_little_endian',
        'is_fragments'
    )

    def __init__(
        self,
        element: DataElement,
        end: Optional[int],
        is_implicit_VR: bool,
        is_little_endian: bool,
        is_fragments: bool,
        bound: Optional[int] = None,
    ) -> None:
        self.element = element
        # absolute end offset, or None when closed by a Sequence Delimitation
        self.end = end
        self.bound = end if end is not None else bound
        self.is_implicit_VR = is_implicit_VR
        self.is_little_endian = is_little_endian
        self.is_fragments = is_fragments


class _Decoder:
    """Decode elements from `fp` with an explicit stack of frames.

    Parameters
    ----------
    fp : filebase.DicomIO
        The source, positioned at the first byte to decode.
    settings : config.Settings
        The strictness, nesting cap and tag dictionary to use.
    """
    def __init__(self, fp: DicomIO, settings: Settings) -> None:
        self.fp = fp
        self.settings = settings
        self.dictionary = settings.tag_dictionary
        self.size = fp.size
        self.stack: List[Union[_DatasetFrame, _SequenceFrame]] = []
        self.depth = 0

    def run(self, frame: Union[_DatasetFrame, _SequenceFrame]) -> None:
        """Decode until `frame` and everything nested in it is complete."""
        self.stack = []
        self.depth = 0
        self._push(frame, self.fp.tell())
        while self.stack:
            frame = self.stack[-1]
            self.fp.is_little_endian = frame.is_little_endian
            if isinstance(frame, _SequenceFrame):
                self._step_sequence(frame)
            else:
                self._step_dataset(frame)

    def _push(
        self, frame: Union[_DatasetFrame, _SequenceFrame], offset: int
    ) -> None:
        if isinstance(frame, _SequenceFrame) and not frame.is_fragments:
            if self.depth >= self.settings.max_nesting_depth:
                raise NestingTooDeepError(
                    "Sequences are nested more than "
                    f"{self.settings.max_nesting_depth} levels deep",
                    offset=offset
                )
            self.depth += 1

        self.stack.append(frame)

    def _pop(self) -> None:
        frame = self.stack.pop()
        if isinstance(frame, _SequenceFrame):
            if not frame.is_fragments:
                self.depth -= 1
            elem = frame.element
            if elem.file_tell is not None:
                elem.byte_length_total = self.fp.tell() - elem.file_tell
        elif frame.is_item:
            cast(Item, frame.dataset).end_tell = self.fp.tell()

    def _limit(self, end: Optional[int]) -> int:
        return self.size if end is None else end

    def _check_bounds(
        self, position: int, end: Optional[int], offset: int, what: str
    ) -> None:
        if position > self._limit(end):
            raise TruncatedStreamError(
                f"{what} extends past the end of its container", offset=offset
            )

    def _check_end(
        self, frame: Union[_DatasetFrame, _SequenceFrame], offset: int
    ) -> bool:
        """Return ``True`` if the defined length `frame` is complete."""
        if frame.end is None or offset < frame.end:
            return False

        if offset > frame.end:
            raise TruncatedStreamError(
                f"Decoding ran 0x{offset - frame.end:X} bytes past the "
                f"declared end of its container at 0x{frame.end:X}",
                offset=offset
            )

        return True

    def _read_delimiter_length(self, tag: BaseTag) -> None:
        length = self.fp.read_UL()
        if length != 0:
            logger.warning(
                f"Expected 0x00000000 after delimiter {tag}, found "
                f"0x{length:X}, at position 0x{self.fp.tell() - 4:X}"
            )

    def _step_dataset(self, frame: _DatasetFrame) -> None:
        fp = self.fp
        offset = fp.tell()
        if frame.remaining == 0:
            self._pop()
            return

        if self._check_end(frame, offset):
            self._pop()
            return

        if (
            frame.end is None and frame.is_item
            and offset >= self._limit(frame.bound)
        ):
            raise TruncatedStreamError(
                "End of the enclosing data reached before the Item "
                "Delimitation Item",
                offset=offset
            )

        tag = fp.read_tag()
        if frame.stop_when is not None and frame.stop_when(tag):
            fp.seek(offset)
            self._pop()
            return

        if tag == ItemDelimiterTag:
            self._read_delimiter_length(tag)
            self._check_bounds(
                fp.tell(), frame.bound, offset, "Item Delimitation Item"
            )
            if frame.is_item and frame.end is None:
                self._pop()
            else:
                logger.warning(
                    f"Unexpected Item Delimitation Item at 0x{offset:X}, "
                    "ignoring it"
                )
            return

        if tag == SequenceDelimiterTag:
            if frame.is_item:
                raise UnexpectedTagError(
                    "Sequence Delimitation Item found before the end of the "
                    "item",
                    offset=offset
                )
            self._read_delimiter_length(tag)
            logger.warning(
                f"Unexpected Sequence Delimitation Item at 0x{offset:X}, "
                "ignoring it"
            )
            return

        VR_, length = self._read_header(tag, frame, offset)
        header_length = fp.tell() - offset
        self._check_bounds(fp.tell(), frame.bound, offset, "Element header")
        if config.debugging:
            fp.seek(offset)
            logger.debug(
                f"{offset:08x}: {bytes2hex(fp.read(header_length)):<35} "
                f"{tag} {VR_} Length: "
                f"{'Undefined' if length == UNDEFINED_LENGTH else length}"
            )

        if frame.remaining is not None:
            frame.remaining -= 1

        if length == UNDEFINED_LENGTH:
            self._start_undefined_length(tag, VR_, frame, offset)
            return

        value_end = fp.tell() + length
        self._check_bounds(value_end, frame.bound, offset, f"Element {tag}")

        if VR_ is VR.SQ:
            elem = DataElement(
                tag, VR_, Sequence(), length=length, file_tell=offset,
                is_little_endian=frame.is_little_endian
            )
            frame.dataset.add(elem)
            self._push(
                _SequenceFrame(
                    elem, value_end, frame.is_implicit_VR,
                    frame.is_little_endian, False
                ),
                offset
            )
            return

        value = fp.read(length, need_exact_length=True)
        padding = b'\x00'
        if VR_.is_padded and length and length % 2 == 0:
            pad_chars = (
                PADDING_CHARS if VR_.is_string else BINARY_PADDING_CHARS
            )
            if value[-1:] in pad_chars:
                padding = value[-1:]
                value = value[:-1]

        frame.dataset.add(
            DataElement(
                tag, VR_, value,
                length=length,
                file_tell=offset,
                byte_length_total=header_length + length,
                is_little_endian=frame.is_little_endian,
                padding=padding,
            )
        )

    def _read_header(
        self, tag: BaseTag, frame: _DatasetFrame, offset: int
    ) -> Tuple[VR, int]:
        """Return the VR and length of the element whose `tag` was read."""
        fp = self.fp
        if frame.is_implicit_VR:
            return self.dictionary.vr_for(tag), fp.read_UL()

        raw_vr = fp.read(2, need_exact_length=True)
        VR_ = lookup_vr(raw_vr.decode('latin_1'))
        if VR_ is None:
            if self.settings.strict_vr:
                raise UnrecognizedVRError(
                    f"Unknown VR '0x{raw_vr.hex().upper()}' for tag {tag}",
                    offset=offset + 4
                )
            logger.warning(
                f"Unknown VR '0x{raw_vr.hex().upper()}' for tag {tag} at "
                f"0x{offset:X}, reading it as UN"
            )
            VR_ = VR.UN

        if VR_ in EXPLICIT_VR_LENGTH_32:
            fp.read(2, need_exact_length=True)  # reserved
            return VR_, fp.read_UL()

        return VR_, fp.read_US()

    def _start_undefined_length(
        self, tag: BaseTag, VR_: VR, frame: _DatasetFrame, offset: int
    ) -> None:
        if not VR_.allows_undefined_length:
            raise InvalidUndefinedLengthError(
                f"Undefined length used with VR {VR_} for tag {tag}",
                offset=offset
            )

        is_fragments = VR_ in (VR.OB, VR.OW) or (
            VR_ is VR.UN and tag == PixelDataTag
        )
        is_implicit_VR = frame.is_implicit_VR
        is_little_endian = frame.is_little_endian
        if VR_ is VR.UN and not is_fragments:
            # Part 5, Section 6.2.2: the items of an undefined length UN
            # are encoded as implicit VR little endian
            is_implicit_VR = True
            is_little_endian = True

        elem = DataElement(
            tag, VR_,
            Sequence(is_undefined_length=True, is_fragments=is_fragments),
            length=UNDEFINED_LENGTH,
            file_tell=offset,
            is_little_endian=frame.is_little_endian,
        )
        frame.dataset.add(elem)
        self._push(
            _SequenceFrame(
                elem, None, is_implicit_VR, is_little_endian, is_fragments,
                bound=frame.bound
            ),
            offset
        )

    def _step_sequence(self, frame: _SequenceFrame) -> None:
        fp = self.fp
        offset = fp.tell()
        if self._check_end(frame, offset):
            self._pop()
            return

        if frame.end is None and offset >= self._limit(frame.bound):
            raise TruncatedStreamError(
                f"End of data reached before the end of {frame.element.tag}",
                offset=offset
            )

        tag = fp.read_tag()
        length = fp.read_UL()
        self._check_bounds(fp.tell(), frame.bound, offset, "Item header")
        if tag == SequenceDelimiterTag:
            if frame.end is not None:
                raise UnexpectedTagError(
                    "Sequence Delimitation Item found in the defined length "
                    f"sequence {frame.element.tag}",
                    offset=offset
                )
            if length != 0:
                logger.warning(
                    f"Expected 0x00000000 after delimiter {tag}, found "
                    f"0x{length:X}, at position 0x{offset + 4:X}"
                )
            self._pop()
            return

        if tag != ItemTag:
            raise UnexpectedTagError(
                f"Expected an Item tag in {frame.element.tag} but found "
                f"{tag}",
                offset=offset
            )

        if config.debugging:
            logger.debug(
                f"{offset:08x}: Found Item tag (start of item), length "
                f"{'Undefined' if length == UNDEFINED_LENGTH else length}"
            )

        items = cast(Sequence, frame.element.value)
        if frame.is_fragments:
            if length == UNDEFINED_LENGTH:
                raise InvalidUndefinedLengthError(
                    "Undefined length fragment item in "
                    f"{frame.element.tag}",
                    offset=offset
                )
            self._check_bounds(
                fp.tell() + length, frame.bound, offset, "Fragment"
            )
            items.append(
                Item(
                    length=length,
                    file_tell=offset,
                    fragment=fp.read(length, need_exact_length=True),
                    end_tell=fp.tell(),
                )
            )
            return

        is_undefined_length = length == UNDEFINED_LENGTH
        item = Item(
            length=length,
            is_undefined_length=is_undefined_length,
            file_tell=offset,
        )
        items.append(item)
        if is_undefined_length:
            item_end = None
        else:
            item_end = fp.tell() + length
            self._check_bounds(item_end, frame.bound, offset, "Item")

        self._push(
            _DatasetFrame(
                item, item_end, frame.is_implicit_VR, frame.is_little_endian,
                bound=frame.bound
            ),
            offset
        )


def _as_dicom_io(
    fp: Union[DicomIO, BinaryIO], is_implicit_VR: bool, is_little_endian: bool
) -> DicomIO:
    if not isinstance(fp, DicomIO):
        fp = DicomFileLike(fp)
    fp.is_implicit_VR = is_implicit_VR
    fp.is_little_endian = is_little_endian

    return fp


def read_dataset(
    fp: Union[DicomIO, BinaryIO],
    is_implicit_VR: bool,
    is_little_endian: bool,
    bytelength: Optional[int] = None,
    stop_when: Optional[StopWhenType] = None,
    settings: Optional[Settings] = None,
) -> Dataset:
    """Return a :class:`~dcmcodec.dataset.Dataset` decoded from `fp`.

    Parameters
    ----------
    fp : file-like
        The file-like to read from, positioned at the first element.
    is_implicit_VR : bool
        ``True`` if the data is encoded as implicit VR, ``False`` otherwise.
    is_little_endian : bool
        ``True`` if the data is encoded as little endian, ``False`` otherwise.
    bytelength : int, optional
        The number of bytes to decode. If ``None`` (default) decode until
        the end of the data.
    stop_when : callable, optional
        A callable taking the tag of the next element, if it returns ``True``
        decoding stops before that element.
    settings : config.Settings, optional
        The decode settings, :data:`~dcmcodec.config.default_settings` if not
        used.

    Returns
    -------
    dataset.Dataset
        The decoded elements, in the order they were found.

    Raises
    ------
    errors.DicomError
        If the data is not a valid encoding.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    start = fp.tell()
    end = None if bytelength is None else start + bytelength
    decoder = _Decoder(fp, settings or default_settings)
    if end is None:
        end = decoder.size

    ds = Dataset()
    decoder.run(
        _DatasetFrame(
            ds, end, is_implicit_VR, is_little_endian, stop_when=stop_when
        )
    )
    return ds


def read_element(
    fp: Union[DicomIO, BinaryIO],
    is_implicit_VR: bool,
    is_little_endian: bool,
    settings: Optional[Settings] = None,
) -> DataElement:
    """Return the single element at the current position of `fp`.

    A sequence element is returned complete with all of its items, and `fp`
    is left positioned just past the element.

    Raises
    ------
    errors.TruncatedStreamError
        If there is no element at the current position.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    decoder = _Decoder(fp, settings or default_settings)
    ds = Dataset()
    decoder.run(
        _DatasetFrame(
            ds, decoder.size, is_implicit_VR, is_little_endian, remaining=1
        )
    )
    if not len(ds):
        raise TruncatedStreamError("No element found", offset=fp.tell())

    return ds.elements()[0]


def read_sequence(
    fp: Union[DicomIO, BinaryIO],
    is_implicit_VR: bool,
    is_little_endian: bool,
    bytelength: int,
    settings: Optional[Settings] = None,
) -> Sequence:
    """Return the items of a sequence value read from `fp`.

    Parameters
    ----------
    fp : file-like
        The file-like to read from, positioned at the first item tag.
    is_implicit_VR : bool
        ``True`` if the items are encoded as implicit VR.
    is_little_endian : bool
        ``True`` if the items are encoded as little endian.
    bytelength : int
        The sequence's length field, ``0xFFFFFFFF`` for an undefined length
        sequence which is read up to and including its Sequence Delimitation
        Item.
    settings : config.Settings, optional
        The decode settings.
    """
    fp = _as_dicom_io(fp, is_implicit_VR, is_little_endian)
    is_undefined_length = bytelength == UNDEFINED_LENGTH
    end = None if is_undefined_length else fp.tell() + bytelength
    seq = Sequence(is_undefined_length=is_undefined_length)
    holder = DataElement(0xFFFFFFFF, VR.SQ, seq, length=bytelength)
    _Decoder(fp, settings or default_settings).run(
        _SequenceFrame(
            holder, end, is_implicit_VR, is_little_endian, False
        )
    )
    return seq


def read_preamble(fp: Union[DicomIO, BinaryIO]) -> bytes:
    """Return the 128 byte preamble and check the ``DICM`` prefix.

    Raises
    ------
    errors.MissingMagicError
        If the ``DICM`` prefix is not found at offset 128.
    """
    logger.debug("Reading File Meta Information preamble...")
    preamble = fp.read(128)
    if config.debugging:
        sample = bytes2hex(preamble[:8]) + "..." + bytes2hex(preamble[-8:])
        logger.debug(f"{0:08x}: {sample}")

    magic = fp.read(4)
    if len(preamble) != 128 or magic != b"DICM":
        raise MissingMagicError(
            "File is missing the DICOM File Meta Information header or the "
            "'DICM' prefix",
            offset=128
        )

    logger.debug(f"{128:08x}: 'DICM' prefix found")
    return preamble


def read_file_meta_info(
    fp: Union[DicomIO, BinaryIO], settings: Optional[Settings] = None
) -> Dataset:
    """Return the group 0x0002 *File Meta Information* elements.

    The meta group is always explicit VR little endian. When present, the
    (0002,0000) *File Meta Information Group Length* bounds the group;
    otherwise elements are read while their group is 0x0002.

    Raises
    ------
    errors.MissingTransferSyntaxError
        If there is no (0002,0010) *Transfer Syntax UID* element.
    """
    fp = _as_dicom_io(fp, False, True)
    start = fp.tell()
    file_meta = read_dataset(
        fp, False, True,
        stop_when=lambda tag: tag != FileMetaInformationGroupLengthTag,
        settings=settings
    )
    group_length = file_meta.get(FileMetaInformationGroupLengthTag)
    if group_length is not None:
        length = group_length.python_value()
        if not isinstance(length, int):
            logger.warning(
                "Invalid (0002,0000) 'File Meta Information Group Length', "
                "reading while the tag group is 0x0002"
            )
            stop_when = lambda tag: tag.group != 2  # noqa: E731
            bytelength = None
        else:
            stop_when = None
            bytelength = length
    else:
        stop_when = lambda tag: tag.group != 2  # noqa: E731
        bytelength = None

    remainder = read_dataset(
        fp, False, True, bytelength=bytelength, stop_when=stop_when,
        settings=settings
    )
    for elem in remainder:
        if elem.tag.group != 2:
            logger.warning(
                f"Element {elem.tag} found within the File Meta Information, "
                "the group length may be wrong"
            )
        file_meta.add(elem)

    if TransferSyntaxUIDTag not in file_meta:
        raise MissingTransferSyntaxError(offset=start)

    return file_meta


def read_partial(
    fileobj: BinaryIO,
    settings: Optional[Settings] = None,
    filename: Optional[str] = None,
) -> DicomDocument:
    """Decode a complete DICOM Part 10 document from `fileobj`.

    Raises
    ------
    errors.NotADicomFileError
        If the stream has no ``DICM`` prefix after the preamble.
    errors.DicomError
        For any other encoding violation, carrying the byte offset.
    """
    settings = settings or default_settings
    fp = _as_dicom_io(fileobj, False, True)
    try:
        preamble = read_preamble(fp)
    except MissingMagicError as exc:
        raise NotADicomFileError(
            f"'{filename or getattr(fileobj, 'name', '<bytes>')}' is not a "
            "DICOM file, the 'DICM' prefix is missing",
            offset=exc.offset
        ) from exc

    file_meta = read_file_meta_info(fp, settings)
    uid = file_meta[TransferSyntaxUIDTag].python_value()
    transfer_syntax = TransferSyntax.from_uid(uid or '')
    logger.debug(f"Transfer syntax is '{transfer_syntax.uid.name}'")

    if transfer_syntax.is_deflated:
        # Part 5, Annex A.5: raw deflate, no zlib header
        zipped = fp.read()
        try:
            unzipped = zlib.decompress(zipped, -zlib.MAX_WBITS)
        except zlib.error as exc:
            raise TruncatedStreamError(
                f"Unable to inflate the deflated data set: {exc}",
                offset=fp.tell() - len(zipped)
            ) from exc
        fp = DicomFileLike(BytesIO(unzipped))

    dataset = read_dataset(
        fp,
        transfer_syntax.is_implicit_VR,
        transfer_syntax.is_little_endian,
        settings=settings,
    )
    return DicomDocument(
        file_meta, dataset, filename, preamble, transfer_syntax
    )


def dcmread(
    fp: Union[PathType, BinaryIO, bytes, bytearray],
    settings: Optional[Settings] = None,
) -> DicomDocument:
    """Read and decode a DICOM Part 10 file.

    Parameters
    ----------
    fp : str or PathLike or file-like or bytes
        The path of the file, a readable and seekable binary file-like
        object, or the encoded bytes themselves.
    settings : config.Settings, optional
        The decode settings, :data:`~dcmcodec.config.default_settings` if not
        used.

    Returns
    -------
    dataset.DicomDocument
        The complete decoded document; a document is never returned partly
        decoded.

    Raises
    ------
    errors.NotADicomFileError
        If the data has no ``DICM`` prefix after the 128 byte preamble.
    errors.DicomError
        If the data is not a valid encoding, with the offset of the problem.

    Examples
    --------

    >>> doc = dcmread("CT_small.dcm")
    >>> doc.lookup("PatientName").python_value()
    'CompressedSamples^CT1'
    """
    filename = None
    caller_owns_file = True
    if isinstance(fp, (str, os.PathLike)):
        filename = os.fspath(fp)
        logger.debug(f"Reading file '{filename}'")
        fp = open(filename, 'rb')
        caller_owns_file = False
    elif isinstance(fp, (bytes, bytearray)):
        fp = BytesIO(fp)

    try:
        return read_partial(cast(BinaryIO, fp), settings, filename)
    except DicomError as exc:
        if config.debugging:
            logger.debug(f"Decoding failed: {exc}")
        raise
    finally:
        if not caller_owns_file:
            fp.close()
