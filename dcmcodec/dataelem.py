# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Define the DataElement class.

A DataElement has a tag,
              a value representation (VR),
              a value (the logical bytes, or a Sequence of Items),
              and the location and size it had in the encoded data.
"""

from typing import Any, List, Optional, Sequence as SequenceType, Union

from dcmcodec.datadict import default_dictionary
from dcmcodec.sequence import Sequence
from dcmcodec.tag import Tag, BaseTag, TagType
from dcmcodec.values import convert_value, encode_value, ValueType
from dcmcodec.vr import VR, BYTES_VR


#: Length field value used for undefined length elements and items
UNDEFINED_LENGTH = 0xFFFFFFFF

INDENT = "   "


class DataElement:
    """Contain and manipulate a DICOM Element.

    Examples
    --------

    >>> elem = DataElement.from_value(0x00100010, 'PN', 'CITIZEN^Joan')
    >>> print(elem)
    (0010,0010) Patient's Name                      PN: 'CITIZEN^Joan'
    >>> elem.value
    b'CITIZEN^Joan'

    Attributes
    ----------
    descripWidth : int
        For string display, this is the maximum width of the description
        field (default ``35``).
    maxBytesToDisplay : int
        For string display, elements with values containing data which is
        longer than this value will display ``"Array of N elements"``
        (default ``16``).
    tag : BaseTag
        The element's tag.
    VR : VR
        The element's Value Representation.
    value : bytes or Sequence
        The logical value bytes, without any trailing pad byte, or for
        sequences and encapsulated data the :class:`Sequence` of items.
    length : int or None
        The length field as found in the encoded data, ``0xFFFFFFFF`` for
        undefined length, or ``None`` for an element that was never decoded.
    file_tell : int or None
        The offset of the first byte of the element's header in the encoded
        data.
    byte_length_total : int or None
        The number of bytes taken up by the element in the encoded data,
        including the header, any padding and any delimiter.
    padding : bytes
        The single byte used to pad odd length values to even length.
    """

    descripWidth = 35
    maxBytesToDisplay = 16
    showVR = True

    def __init__(
        self,
        tag: TagType,
        VR_: Union[str, VR],
        value: Union[bytes, Sequence, None] = None,
        length: Optional[int] = None,
        file_tell: Optional[int] = None,
        byte_length_total: Optional[int] = None,
        is_undefined_length: bool = False,
        is_little_endian: bool = True,
        padding: bytes = b'\x00',
    ) -> None:
        self.tag: BaseTag = Tag(tag)
        self.VR = VR(VR_)
        if value is None:
            value = Sequence() if self.VR is VR.SQ else b''
        if isinstance(value, list) and not isinstance(value, Sequence):
            value = Sequence(value)
        if isinstance(value, bytearray):
            value = bytes(value)

        self.value: Union[bytes, Sequence] = value
        self.length = length
        self.file_tell = file_tell
        self.byte_length_total = byte_length_total
        self.is_undefined_length = (
            is_undefined_length or length == UNDEFINED_LENGTH
        )
        self.is_little_endian = is_little_endian
        self.padding = padding

    @classmethod
    def from_value(
        cls,
        tag: TagType,
        VR_: Union[str, VR],
        value: Any,
        is_little_endian: bool = True,
        encodings: Optional[SequenceType[str]] = None,
        **kwargs: Any
    ) -> "DataElement":
        """Return a new element with `value` converted to its raw bytes.

        Parameters
        ----------
        tag : int or str or 2-tuple
            The element's tag.
        VR_ : str
            The element's VR.
        value : Any
            A python value as returned by :meth:`python_value`, or for
            **SQ** a list of :class:`~dcmcodec.sequence.Item`.
        is_little_endian : bool, optional
            The byte order to use for numeric values.
        encodings : list of str, optional
            The python encodings to use for text values.
        """
        VR_ = VR(VR_)
        if VR_ is not VR.SQ:
            value = encode_value(VR_, value, is_little_endian, encodings)

        return cls(
            tag, VR_, value, is_little_endian=is_little_endian, **kwargs
        )

    def python_value(
        self, encodings: Optional[SequenceType[str]] = None
    ) -> Union[ValueType, Sequence]:
        """Return the value converted to python types.

        Sequences are returned unchanged.
        """
        if self.is_sequence:
            return self.value

        return convert_value(
            self.VR, self.value, self.is_little_endian, encodings
        )

    @property
    def is_sequence(self) -> bool:
        """Return ``True`` if the value is a list of items."""
        return isinstance(self.value, Sequence)

    @property
    def is_fragmented(self) -> bool:
        """Return ``True`` for encapsulated data split into fragments."""
        return self.is_sequence and self.value.is_fragments

    @property
    def VM(self) -> int:
        """Return the value multiplicity of the element as :class:`int`."""
        if self.is_sequence:
            return 1

        value = self.python_value()
        if value is None:
            return 0
        if isinstance(value, list):
            return len(value)

        return 1

    @property
    def name(self) -> str:
        """Return the DICOM dictionary name for the element as :class:`str`.
        """
        return default_dictionary.description(self.tag)

    @property
    def keyword(self) -> str:
        """Return the element's keyword (if known) as :class:`str`."""
        return default_dictionary.keyword(self.tag)

    @property
    def end_tell(self) -> Optional[int]:
        """Return the offset just past the element in the encoded data."""
        if self.file_tell is None or self.byte_length_total is None:
            return None

        return self.file_tell + self.byte_length_total

    @property
    def repval(self) -> str:
        """Return a :class:`str` representation of the element's value."""
        if self.is_sequence:
            if self.is_fragmented:
                return f"{len(self.value)} fragment(s)"
            return f"{len(self.value)} item(s)"

        if self.VR in BYTES_VR:
            if len(self.value) > self.maxBytesToDisplay:
                return f"Array of {len(self.value)} elements"
            return repr(self.value)

        value = self.python_value()
        if isinstance(value, list) and len(value) > self.maxBytesToDisplay:
            return f"Array of {len(value)} elements"

        return repr(value) if value is not None else ''

    def __str__(self) -> str:
        """Return :class:`str` representation of the element."""
        repVal = self.repval
        name = self.name[:self.descripWidth]
        line = f"{self.tag} {name:<{self.descripWidth}} "
        if self.showVR:
            return f"{line}{self.VR}: {repVal}"

        return f"{line}{repVal}"

    def __repr__(self) -> str:
        """Return the representation of the element."""
        return str(self)

    def describe(self, indent: int = 0) -> List[str]:
        """Return a list of human readable lines for the element.

        Items of sequences are rendered beneath the element, their elements
        indented one level further and each item closed by a separator line.

        Parameters
        ----------
        indent : int, optional
            The nesting level of the element, default ``0``.
        """
        from dcmcodec.dataset import describe_elements

        return describe_elements([self], indent)

    def __eq__(self, other: Any) -> bool:
        """Compare `self` and `other` for equality.

        Elements are equal when their tag, VR and value are equal; the
        encoded location and length are not compared.
        """
        if other is self:
            return True

        if isinstance(other, self.__class__):
            return (
                self.tag == other.tag
                and self.VR == other.VR
                and self.value == other.value
            )

        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__ = None  # type: ignore
