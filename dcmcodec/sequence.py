# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Define the Sequence class, which contains a sequence DataElement's items.

Sequence is a list of dcmcodec Item objects. The same class holds the
fragments of encapsulated (undefined length **OB**/**OW**) data, in which
case each item carries raw bytes rather than elements.
"""
from typing import Any, Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from dcmcodec.dataset import Item


def validate_item(item: object) -> "Item":
    """Check that `item` is a :class:`~dcmcodec.dataset.Item` instance."""
    from dcmcodec.dataset import Item

    if not isinstance(item, Item):
        raise TypeError('Sequence contents must be Item instances.')

    return item


class Sequence(list):
    """Class to hold multiple :class:`~dcmcodec.dataset.Item` in a
    :class:`list`.

    Attributes
    ----------
    is_undefined_length : bool
        ``True`` if the sequence is (or will be) encoded with an undefined
        length and closed by a Sequence Delimitation Item.
    is_fragments : bool
        ``True`` if the items are fragments of encapsulated data.
    """

    def __init__(
        self,
        iterable: Optional[Iterable["Item"]] = None,
        is_undefined_length: bool = False,
        is_fragments: bool = False,
    ) -> None:
        from dcmcodec.dataset import Dataset

        # A Dataset is iterable, but belongs inside the sequence
        if isinstance(iterable, Dataset):
            raise TypeError('The Sequence constructor requires an iterable')

        super().__init__(validate_item(item) for item in iterable or [])
        self.is_undefined_length = is_undefined_length
        self.is_fragments = is_fragments

    def append(self, item: "Item") -> None:
        """Append an :class:`~dcmcodec.dataset.Item` to the sequence."""
        super().append(validate_item(item))

    def extend(self, items: Iterable["Item"]) -> None:
        """Extend the sequence using an iterable of items."""
        super().extend(validate_item(item) for item in items)

    def insert(self, position: int, item: "Item") -> None:  # type: ignore
        """Insert an :class:`~dcmcodec.dataset.Item` into the sequence."""
        super().insert(position, validate_item(item))

    def __setitem__(self, idx: Any, val: Any) -> None:
        if isinstance(idx, slice):
            super().__setitem__(idx, [validate_item(v) for v in val])
        else:
            super().__setitem__(idx, validate_item(val))

    def __repr__(self) -> str:  # type: ignore[override]
        """String representation of the Sequence."""
        return f"<{self.__class__.__name__}, length {len(self)}>"
