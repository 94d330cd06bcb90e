# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Define the Dataset, Item and DicomDocument classes.

A Dataset is an ordered collection of DataElements, unique by tag and
addressable by tag or keyword. An Item is a Dataset nested inside a
Sequence. A DicomDocument joins the file meta information and the main
data set of one decoded or to be encoded Part 10 file.
"""

from typing import (
    Any, Dict, Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING
)

from dcmcodec.charset import convert_encodings, default_encoding
from dcmcodec.config import logger
from dcmcodec.dataelem import DataElement, INDENT
from dcmcodec.tag import Tag, BaseTag, TagType, SpecificCharacterSetTag

if TYPE_CHECKING:  # pragma: no cover
    from dcmcodec.uid import TransferSyntax


def sorted_by_tag(elements: Iterable[DataElement]) -> List[DataElement]:
    """Return `elements` as a list ordered by (group, element)."""
    return sorted(elements, key=lambda elem: elem.tag)


def describe_elements(
    elements: Iterable[DataElement], indent: int = 0
) -> List[str]:
    """Return human readable lines for `elements` and any nested items.

    Parameters
    ----------
    elements : iterable of DataElement
        The elements to describe, in the order they should be shown.
    indent : int, optional
        The indent level of the top elements (default ``0``).

    Returns
    -------
    list of str
        One line per element; sequences are followed by the elements of each
        of their items, indented one more level and closed by ``---------``.
    """
    lines: List[str] = []
    # (remaining elements or lines, indent level, closing line)
    stack: List[Tuple[Iterator[Any], int, Optional[str]]] = [
        (iter(elements), indent, None)
    ]
    while stack:
        entries, level, closer = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            if closer is not None:
                lines.append(closer)
            continue

        indent_str = INDENT * level
        if isinstance(entry, str):
            lines.append(indent_str + entry)
            continue

        if not entry.is_sequence:
            lines.append(indent_str + str(entry))
            continue

        kind = "fragment(s)" if entry.is_fragmented else "item(s)"
        lines.append(
            f"{indent_str}{entry.tag}  {entry.name}   "
            f"{len(entry.value)} {kind} ---- "
        )
        separator = INDENT * (level + 1) + "---------"
        for item in reversed(entry.value):
            if item.is_fragment:
                body = iter([f"Fragment of {len(item.fragment)} bytes"])
            else:
                body = iter(item.elements())
            stack.append((body, level + 1, separator))

    return lines


class Dataset:
    """A collection (dictionary) of DICOM
    :class:`~dcmcodec.dataelem.DataElement` instances.

    Elements keep the order they were added in, which for decoded data is
    the order they were found in the encoded stream. Adding an element with
    a tag that is already present replaces the existing element (last write
    wins) and logs a warning.

    Examples
    --------

    >>> ds = Dataset()
    >>> ds.add(DataElement.from_value('PatientID', 'LO', '12345'))
    >>> ds['PatientID'].python_value()
    '12345'
    >>> 0x00100020 in ds
    True
    """
    indent_chars = INDENT

    def __init__(self, elements: Optional[Iterable[DataElement]] = None):
        self._dict: Dict[BaseTag, DataElement] = {}
        for elem in elements or []:
            self.add(elem)

    def add(self, data_element: DataElement) -> None:
        """Add an element to the :class:`Dataset`.

        Parameters
        ----------
        data_element : dataelem.DataElement
            The :class:`~dcmcodec.dataelem.DataElement` to add.
        """
        if not isinstance(data_element, DataElement):
            raise TypeError("Dataset contents must be DataElement instances")

        tag = data_element.tag
        if tag in self._dict:
            logger.warning(
                f"Duplicate tag {tag} found, replacing the existing element"
            )

        self._dict[tag] = data_element

    def __setitem__(self, key: TagType, data_element: DataElement) -> None:
        if Tag(key) != data_element.tag:
            raise ValueError(
                f"The key {Tag(key)} does not match the element's tag "
                f"{data_element.tag}"
            )

        self.add(data_element)

    def __getitem__(self, key: TagType) -> DataElement:
        """Return the element with tag or keyword `key`.

        Raises
        ------
        KeyError
            If no element with that tag is present.
        """
        return self._dict[Tag(key)]

    def get(
        self, key: TagType, default: Optional[Any] = None
    ) -> Optional[DataElement]:
        """Return the element for `key` or `default` if it isn't present."""
        try:
            return self[key]
        except (KeyError, ValueError, OverflowError):
            return default

    def __contains__(self, key: Any) -> bool:
        """Return ``True`` if an element with tag or keyword `key` is present.
        """
        try:
            return Tag(key) in self._dict
        except (ValueError, OverflowError, TypeError):
            return False

    def __delitem__(self, key: TagType) -> None:
        del self._dict[Tag(key)]

    def __iter__(self) -> Iterator[DataElement]:
        """Iterate through the elements in insertion order."""
        yield from list(self._dict.values())

    def __len__(self) -> int:
        return len(self._dict)

    def keys(self) -> List[BaseTag]:
        """Return the tags in the :class:`Dataset` in insertion order."""
        return list(self._dict)

    def elements(self) -> List[DataElement]:
        """Return the elements in insertion order."""
        return list(self._dict.values())

    def sorted_elements(self) -> List[DataElement]:
        """Return the elements ordered by tag."""
        return sorted_by_tag(self._dict.values())

    def sort(self) -> None:
        """Reorder the elements by tag, in place."""
        self._dict = {elem.tag: elem for elem in self.sorted_elements()}

    def iterall(self) -> Iterator[DataElement]:
        """Iterate through the :class:`Dataset`, yielding all the elements.

        Unlike iterating the :class:`Dataset` directly, this yields the
        elements of every nested item too, depth first.
        """
        stack: List[Iterator[DataElement]] = [iter(self.elements())]
        while stack:
            elem = next(stack[-1], None)
            if elem is None:
                stack.pop()
                continue

            yield elem
            if elem.is_sequence:
                nested = [i for i in elem.value if not i.is_fragment]
                for item in reversed(nested):
                    stack.append(iter(item.elements()))

    @property
    def character_set(self) -> List[str]:
        """Return the python encodings for (0008,0005) *Specific Character
        Set*, or the default encoding if absent.
        """
        elem = self.get(SpecificCharacterSetTag)
        if elem is None or not elem.value:
            return [default_encoding]

        value = elem.python_value()
        if isinstance(value, str):
            value = [value]

        return convert_encodings([v or '' for v in value])

    def describe(self, indent: int = 0) -> List[str]:
        """Return human readable lines for every element, see
        :func:`describe_elements`.
        """
        return describe_elements(self.elements(), indent)

    def _pretty_str(self, indent: int = 0) -> str:
        """Return a string of the elements with indented levels."""
        return "\n".join(self.describe(indent))

    def __str__(self) -> str:
        return self._pretty_str()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}, {len(self)} element(s)>"

    def __eq__(self, other: Any) -> bool:
        """Compare `self` and `other` for equality.

        Two datasets are equal when they hold equal elements, regardless of
        their order.
        """
        if other is self:
            return True

        if isinstance(other, Dataset):
            return self._dict == other._dict

        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__ = None  # type: ignore


class Item(Dataset):
    """One item of a :class:`~dcmcodec.sequence.Sequence`.

    Attributes
    ----------
    length : int or None
        The item's length field as found in the encoded data, ``0xFFFFFFFF``
        for an undefined length item.
    is_undefined_length : bool
        ``True`` if the item is (or will be) closed by an Item Delimitation
        Item.
    file_tell : int or None
        The offset of the item tag in the encoded data.
    end_tell : int or None
        The offset just past the item, including any delimiter.
    fragment : bytes or None
        For items of encapsulated data, the raw fragment bytes. Fragment
        items never contain elements.
    """
    def __init__(
        self,
        elements: Optional[Iterable[DataElement]] = None,
        length: Optional[int] = None,
        is_undefined_length: bool = False,
        file_tell: Optional[int] = None,
        end_tell: Optional[int] = None,
        fragment: Optional[bytes] = None,
    ) -> None:
        super().__init__(elements)
        self.length = length
        self.is_undefined_length = is_undefined_length
        self.file_tell = file_tell
        self.end_tell = end_tell
        self.fragment = fragment

    @classmethod
    def from_fragment(cls, fragment: bytes) -> "Item":
        """Return a new fragment item holding `fragment`."""
        return cls(fragment=bytes(fragment))

    @property
    def is_fragment(self) -> bool:
        """Return ``True`` if the item holds raw fragment bytes."""
        return self.fragment is not None

    def add(self, data_element: DataElement) -> None:
        if self.is_fragment:
            raise TypeError("A fragment item cannot contain elements")

        super().add(data_element)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Item) and (self.is_fragment or other.is_fragment):
            return self.fragment == other.fragment

        return super().__eq__(other)

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        if self.is_fragment:
            return f"<Item, fragment of {len(self.fragment)} bytes>"

        return super().__repr__()


class DicomDocument:
    """A decoded (or to be encoded) DICOM Part 10 file.

    Attributes
    ----------
    file_meta : Dataset
        The group 0x0002 *File Meta Information* elements.
    dataset : Dataset
        The main data set, encoded with :attr:`transfer_syntax`.
    filename : str or None
        The path the document was read from, if any.
    preamble : bytes or None
        The 128 byte preamble, ``None`` to write 128 zero bytes.
    transfer_syntax : TransferSyntax or None
        The transfer syntax resolved from (0002,0010) when decoding.
    """
    def __init__(
        self,
        file_meta: Optional[Dataset] = None,
        dataset: Optional[Dataset] = None,
        filename: Optional[str] = None,
        preamble: Optional[bytes] = None,
        transfer_syntax: Optional["TransferSyntax"] = None,
    ) -> None:
        self.file_meta = file_meta if file_meta is not None else Dataset()
        self.dataset = dataset if dataset is not None else Dataset()
        self.filename = filename
        self.preamble = preamble
        self.transfer_syntax = transfer_syntax

    def lookup(self, tag: TagType) -> Optional[DataElement]:
        """Return the top level element with `tag`, or ``None``.

        Group 0x0002 tags are looked up in the file meta information, all
        others in the main data set.
        """
        try:
            tag = Tag(tag)
        except (ValueError, OverflowError):
            return None

        if tag.group == 0x0002:
            return self.file_meta.get(tag)

        return self.dataset.get(tag)

    def __contains__(self, tag: Any) -> bool:
        return self.lookup(tag) is not None

    def __getitem__(self, tag: TagType) -> DataElement:
        elem = self.lookup(tag)
        if elem is None:
            raise KeyError(tag)

        return elem

    def all_elements(self) -> List[DataElement]:
        """Return the file meta then main data set elements in the order they
        were added.
        """
        return self.file_meta.elements() + self.dataset.elements()

    def describe(self) -> List[str]:
        """Return human readable lines for the whole document."""
        lines = []
        if len(self.file_meta):
            lines.append("Dataset.file_meta -------------------------------")
            lines.extend(self.file_meta.describe())
            lines.append("-------------------------------------------------")

        lines.extend(self.dataset.describe())
        return lines

    def to_bytes(self) -> bytes:
        """Return the document encoded as a DICOM Part 10 byte string."""
        from dcmcodec.filewriter import encode_document

        return encode_document(self)

    def __str__(self) -> str:
        return "\n".join(self.describe())

    def __repr__(self) -> str:
        return (
            f"<DicomDocument {self.filename or '(no file)'}, "
            f"{len(self.file_meta)} meta and {len(self.dataset)} element(s)>"
        )
