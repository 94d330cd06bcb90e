# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Define Tag class to hold a DICOM (group, element) tag and related functions.

The 4 bytes of the DICOM tag are stored as an 'int'. Tags are
stored as a single number and separated to (group, element) as required.
"""
from typing import Tuple, Any, Union, TypeVar, Optional


T = TypeVar("T", int, str)
TagType = Union[int, str, Tuple[int, int]]


def Tag(arg: Union[T, Tuple[T, T]], arg2: Optional[T] = None) -> "BaseTag":
    """Create a :class:`BaseTag`.

    General function for creating a :class:`BaseTag` in any of the standard
    forms:

    * ``Tag(0x00100015)``
    * ``Tag('0x00100015')``
    * ``Tag((0x10, 0x50))``
    * ``Tag(('0x10', '0x50'))``
    * ``Tag(0x0010, 0x0015)``
    * ``Tag('0xFE', '0x0010')``
    * ``Tag("PatientName")``

    Parameters
    ----------
    arg : int or str or 2-tuple
        If :class:`int` or :class:`str`, then either the group or the combined
        group/element number of the DICOM tag. If :class:`tuple` then the
        (group, element) numbers as :class:`!int` or :class:`!str`.
    arg2 : int or str, optional
        The element number of the DICOM tag, required when `arg` only contains
        the group number of the tag.

    Returns
    -------
    BaseTag
    """
    if isinstance(arg, BaseTag):
        return arg

    if arg2 is not None:
        arg = (arg, arg2)  # type: ignore

    if isinstance(arg, (tuple, list)):
        if len(arg) != 2:
            raise ValueError("Tag must be created using an int or 2-tuple")

        valid = False
        if isinstance(arg[0], str):
            valid = isinstance(arg[1], str)
            if valid:
                arg = (int(arg[0], 16), int(arg[1], 16))  # type: ignore
        elif isinstance(arg[0], int):
            valid = isinstance(arg[1], int)
        if not valid:
            raise ValueError(
                "Both arguments for Tag must be the same type, either "
                "string or int."
            )

        if arg[0] > 0xFFFF or arg[1] > 0xFFFF:  # type: ignore
            raise OverflowError(
                "Groups and elements of tags must each be <=2 byte integers"
            )

        long_value = (arg[0] << 16) | arg[1]  # type: ignore

    elif isinstance(arg, str):
        try:
            long_value = int(arg, 16)
        except ValueError:
            from dcmcodec.datadict import tag_for_keyword
            keyword_tag = tag_for_keyword(arg)
            if keyword_tag is None:
                raise ValueError(
                    f"'{arg}' is not a valid int or DICOM keyword"
                )
            long_value = keyword_tag

        if long_value > 0xFFFFFFFF:
            raise OverflowError(
                f"Tags are limited to 32-bit length; tag {long_value!r}"
            )

    else:
        long_value = arg
        if long_value > 0xFFFFFFFF:
            raise OverflowError(
                f"Tags are limited to 32-bit length; tag {long_value!r}"
            )

    if long_value < 0:
        raise ValueError("Tags must be positive.")

    return BaseTag(long_value)


class BaseTag(int):
    """Represents a DICOM element (group, element) tag.

    Tags are represented as an :class:`int` and so order numerically, group
    first and then element.

    Attributes
    ----------
    element : int
        The element number of the tag.
    group : int
        The group number of the tag.
    is_private : bool
        Returns ``True`` if the corresponding element is private, ``False``
        otherwise.
    """
    def __lt__(self, other: Any) -> bool:
        """Return ``True`` if `self` is less than `other`."""
        if not isinstance(other, BaseTag):
            try:
                other = Tag(other)
            except Exception:
                raise TypeError("Cannot compare Tag with non-Tag item")

        return int(self) < int(other)

    def __le__(self, other: Any) -> bool:
        return self == other or self < other

    def __gt__(self, other: Any) -> bool:
        return not (self == other or self < other)

    def __ge__(self, other: Any) -> bool:
        return self == other or self > other

    def __eq__(self, other: Any) -> bool:
        """Return ``True`` if `self` equals `other`."""
        if not isinstance(other, int):
            try:
                other = Tag(other)
            except Exception:
                raise TypeError("Cannot compare Tag with non-Tag item")

        return int(self) == int(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    # overriding __eq__ removes the inherited hash
    __hash__ = int.__hash__

    def __str__(self) -> str:
        """Return the tag value as a hex string '(GGGG,EEEE)'."""
        return "({0:04X},{1:04X})".format(self.group, self.element)

    __repr__ = __str__

    @property
    def group(self) -> int:
        """Return the tag's group number as :class:`int`."""
        return self >> 16

    @property
    def element(self) -> int:
        """Return the tag's element number as :class:`int`."""
        return self & 0xffff

    elem = element

    @property
    def is_private(self) -> bool:
        """Return ``True`` if the tag is private (has an odd group number)."""
        return self.group % 2 == 1

    @property
    def is_private_creator(self) -> bool:
        """Return ``True`` if the tag is a private creator."""
        return self.is_private and 0x0010 <= self.element < 0x0100

    @property
    def is_group_length(self) -> bool:
        """Return ``True`` if the tag is a (gggg,0000) group length."""
        return self.element == 0

    @property
    def is_delimiter(self) -> bool:
        """Return ``True`` for the item and sequence framing tags."""
        return self.group == 0xFFFE


def TupleTag(group_elem: Tuple[int, int]) -> BaseTag:
    """Fast factory for :class:`BaseTag` object with known safe (group, elem)
    :class:`tuple`
    """
    long_value = group_elem[0] << 16 | group_elem[1]
    return BaseTag(long_value)


# Define some special tags:
# See DICOM Standard Part 5, Section 7.5

# start of Sequence Item
ItemTag = TupleTag((0xFFFE, 0xE000))

# end of Sequence Item
ItemDelimiterTag = TupleTag((0xFFFE, 0xE00D))

# end of Sequence of undefined length
SequenceDelimiterTag = TupleTag((0xFFFE, 0xE0DD))

# File Meta Information
FileMetaInformationGroupLengthTag = TupleTag((0x0002, 0x0000))
TransferSyntaxUIDTag = TupleTag((0x0002, 0x0010))

PixelDataTag = TupleTag((0x7FE0, 0x0010))
SpecificCharacterSetTag = TupleTag((0x0008, 0x0005))
