# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Byte level editing of encoded DICOM data using decoded element offsets."""

from typing import Union

from dcmcodec.dataelem import DataElement


def remove_element_bytes(
    data: Union[bytes, bytearray], element: DataElement
) -> bytes:
    """Return `data` with the complete encoding of `element` cut out.

    The element must have been decoded from `data` (not from an inflated
    copy of it) so that its :attr:`~dcmcodec.dataelem.DataElement.file_tell`
    and :attr:`~dcmcodec.dataelem.DataElement.byte_length_total` locate it.

    .. note::

        Only the element's own bytes are removed; the length fields of any
        sequence or item containing the element and the (0002,0000) group
        length are not updated, so use this with top level data set elements.

    Parameters
    ----------
    data : bytes or bytearray
        The encoded data the element was decoded from.
    element : dataelem.DataElement
        The element to remove.

    Returns
    -------
    bytes
        The data without the element.

    Raises
    ------
    ValueError
        If the element has no recorded location or it lies outside `data`.
    """
    start = element.file_tell
    end = element.end_tell
    if start is None or end is None:
        raise ValueError(
            f"The location of element {element.tag} in the encoded data is "
            "unknown"
        )

    if start < 0 or end > len(data) or end < start:
        raise ValueError(
            f"Element {element.tag} at 0x{start:X} with a total length of "
            f"{element.byte_length_total} lies outside the data"
        )

    return bytes(data[:start]) + bytes(data[end:])
