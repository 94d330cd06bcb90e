# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Access dicom dictionary information.

The dictionary is only used to find the VR of elements in implicit VR data
sets and to give elements a readable name. It is a pluggable mapping: the
module level functions use :data:`default_dictionary`, while a decode can
use its own :class:`TagDictionary` via :class:`~dcmcodec.config.Settings`.
"""

from typing import Dict, Iterator, Mapping, Optional, Tuple

from dcmcodec._dicom_dict import DicomDictionary
from dcmcodec.tag import Tag, BaseTag, TagType
from dcmcodec.vr import VR


DictEntry = Tuple[str, str, str, str, str]


class TagDictionary(Mapping[BaseTag, DictEntry]):
    """A mapping of ``{tag: (VR, VM, name, is_retired, keyword), ...}``.

    Parameters
    ----------
    entries : dict, optional
        The initial entries, keyed by :class:`int` tag. If not used then
        the dictionary starts empty.
    """
    def __init__(self, entries: Optional[Mapping[int, DictEntry]] = None):
        self._entries: Dict[BaseTag, DictEntry] = {}
        self._keywords: Dict[str, BaseTag] = {}
        if entries:
            self.update(entries)

    def __getitem__(self, tag: int) -> DictEntry:
        return self._entries[Tag(tag)]

    def __iter__(self) -> Iterator[BaseTag]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> "TagDictionary":
        """Return an independent copy of the dictionary."""
        return TagDictionary(self._entries)

    def update(self, entries: Mapping[int, DictEntry]) -> None:
        """Add or replace `entries`.

        Parameters
        ----------
        entries : dict
            :class:`dict` of form:
            ``{tag: (VR, VM, description, is_retired, keyword), ...}``

        Raises
        ------
        ValueError
            If one of the entries is a private tag or has an unknown VR.
        """
        for tag, entry in entries.items():
            tag = Tag(tag)
            if tag.is_private:
                raise ValueError(
                    f"Private tag {tag} cannot be added to the dictionary"
                )
            if entry[0] != 'NONE' and entry[0] not in VR.__members__:
                raise ValueError(f"Unknown VR '{entry[0]}' for tag {tag}")

            self._entries[tag] = tuple(entry)  # type: ignore
            if entry[4]:
                self._keywords[entry[4]] = tag

    def add_entry(
        self,
        tag: int,
        VR: str,
        keyword: str,
        description: str,
        VM: str = '1',
        is_retired: str = ''
    ) -> None:
        """Add or replace a single non-private entry."""
        self.update({tag: (VR, VM, description, is_retired, keyword)})

    def vr_for(self, tag: TagType) -> VR:
        """Return the VR to use for `tag` when decoding implicit VR.

        Group length elements are always **UL** and private creator
        elements are always **LO**. Elements that are not in the dictionary
        are **UN**.
        """
        tag = Tag(tag)
        if tag.is_group_length:
            return VR.UL

        if tag.is_private_creator:
            return VR.LO

        entry = self._entries.get(tag)
        if entry is None or entry[0] == 'NONE':
            return VR.UN

        return VR(entry[0])

    def description(self, tag: TagType) -> str:
        """Return the element name for `tag`, or ``''`` if unknown."""
        tag = Tag(tag)
        entry = self._entries.get(tag)
        if entry is not None:
            return entry[2]

        if tag.is_group_length:
            return "Group Length"

        if tag.is_private_creator:
            return "Private Creator"

        if tag.is_private:
            return "Private tag data"

        return ""

    def keyword(self, tag: TagType) -> str:
        """Return the keyword for `tag`, or ``''`` if unknown."""
        entry = self._entries.get(Tag(tag))
        return entry[4] if entry else ""

    def tag_for_keyword(self, keyword: str) -> Optional[BaseTag]:
        """Return the tag for `keyword`, or ``None`` if unknown."""
        return self._keywords.get(keyword)


#: The dictionary used when no other is supplied
default_dictionary = TagDictionary(DicomDictionary)


def add_dict_entry(
    tag: int,
    VR: str,
    keyword: str,
    description: str,
    VM: str = '1',
    is_retired: str = ''
) -> None:
    """Update the default DICOM dictionary with a new non-private entry.

    Parameters
    ----------
    tag : int
        The tag number for the new dictionary entry.
    VR : str
        DICOM value representation.
    keyword : str
        The keyword used for the entry.
    description : str
        The descriptive name used in printing the entry.
    VM : str, optional
        DICOM value multiplicity. If not specified, then ``'1'`` is used.
    is_retired : str, optional
        Usually leave as blank string (default). Set to ``'Retired'`` if is a
        retired data element.

    Raises
    ------
    ValueError
        If the tag is a private tag.

    Notes
    -----
    Does not permanently update the dictionary, but only during run-time.
    Will replace an existing entry if the tag already exists in the dictionary.

    Examples
    --------

    >>> add_dict_entry(0x00980010, "UL", "TestOne", "Test One")
    >>> dictionary_VR(0x00980010)
    'UL'
    """
    default_dictionary.add_entry(
        tag, VR, keyword, description, VM, is_retired
    )


def add_dict_entries(new_entries_dict: Mapping[int, DictEntry]) -> None:
    """Update the default DICOM dictionary with new non-private entries.

    Parameters
    ----------
    new_entries_dict : dict
        :class:`dict` of form:
        ``{tag: (VR, VM, description, is_retired, keyword), ...}``
        where parameters are as described in :func:`add_dict_entry`.
    """
    default_dictionary.update(new_entries_dict)


def get_entry(tag: TagType) -> DictEntry:
    """Return an entry from the default DICOM dictionary as a tuple.

    Raises
    ------
    KeyError
        If the tag is not present in the DICOM data dictionary.
    """
    try:
        return default_dictionary[tag]
    except KeyError:
        raise KeyError(f"Tag {Tag(tag)} not found in DICOM dictionary")


def dictionary_has_tag(tag: TagType) -> bool:
    """Return ``True`` if `tag` is in the default dictionary."""
    return Tag(tag) in default_dictionary


def dictionary_VR(tag: TagType) -> str:
    """Return the VR of the element corresponding to `tag`.

    Raises
    ------
    KeyError
        If the tag is not present in the DICOM data dictionary.
    """
    return get_entry(tag)[0]


def dictionary_VM(tag: TagType) -> str:
    """Return the VM of the element corresponding to `tag`."""
    return get_entry(tag)[1]


def dictionary_description(tag: TagType) -> str:
    """Return the description of the element corresponding to `tag`."""
    return get_entry(tag)[2]


def dictionary_keyword(tag: TagType) -> str:
    """Return the keyword of the element corresponding to `tag`."""
    return get_entry(tag)[4]


def keyword_for_tag(tag: TagType) -> str:
    """Return the keyword for `tag` or ``''`` if it isn't in the dictionary.
    """
    return default_dictionary.keyword(tag)


def tag_for_keyword(keyword: str) -> Optional[BaseTag]:
    """Return the tag of the element corresponding to `keyword`.

    Returns
    -------
    BaseTag or None
        If the element is in the DICOM data dictionary then returns the
        corresponding element's tag, otherwise returns ``None``.
    """
    return default_dictionary.tag_for_keyword(keyword)
