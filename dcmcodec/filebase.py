# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Hold DicomIO classes, which do basic position tracked I/O for DICOM data.
"""

from io import BytesIO
import os
from struct import unpack, pack
from typing import Any, BinaryIO, Optional, Tuple

from dcmcodec.errors import TruncatedStreamError
from dcmcodec.tag import Tag, BaseTag


class DicomIO:
    """File object which holds transfer syntax info and anything else we need.

    The byte order of the unsigned short/long and tag helpers follows
    :attr:`is_little_endian`, which defaults to ``True``.
    """

    # number of times to read if don't get requested bytes
    max_read_attempts = 3

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._implicit_VR = False
        self.is_little_endian = True

    def read_le_tag(self) -> Tuple[int, int]:
        """Read and return two unsigned shorts (little endian)."""
        return unpack(b"<HH", self.read(4, need_exact_length=True))

    def read_be_tag(self) -> Tuple[int, int]:
        """Read and return two unsigned shorts (big endian)."""
        return unpack(b">HH", self.read(4, need_exact_length=True))

    def read_tag(self) -> BaseTag:
        """Return the next 4 bytes as a :class:`~dcmcodec.tag.BaseTag`."""
        group, elem = self._read_tag()
        return BaseTag(group << 16 | elem)

    def write_tag(self, tag: Any) -> None:
        """Write a dicom tag (two unsigned shorts)."""
        if not isinstance(tag, BaseTag):
            tag = Tag(tag)
        self.write_US(tag.group)
        self.write_US(tag.element)

    def read_leUS(self) -> int:
        """Return an unsigned short read with little endian byte order"""
        return unpack(b"<H", self.read(2, need_exact_length=True))[0]

    def read_beUS(self) -> int:
        """Return an unsigned short read with big endian byte order"""
        return unpack(b">H", self.read(2, need_exact_length=True))[0]

    def read_leUL(self) -> int:
        """Return an unsigned long read with little endian byte order"""
        return unpack(b"<L", self.read(4, need_exact_length=True))[0]

    def read_beUL(self) -> int:
        """Return an unsigned long read with big endian byte order"""
        return unpack(b">L", self.read(4, need_exact_length=True))[0]

    def read(
        self, length: Optional[int] = None, need_exact_length: bool = False
    ) -> bytes:
        """Read the required length, raise
        :class:`~dcmcodec.errors.TruncatedStreamError` if less is available
        and `need_exact_length` is ``True``.

        If length is ``None``, then read all bytes
        """
        parent_read = self.parent_read
        if length is None:
            return parent_read()

        bytes_read = parent_read(length)
        if len(bytes_read) < length and need_exact_length:
            # Didn't get all the desired bytes. Keep trying to get the rest.
            attempts = 0
            while (
                attempts < self.max_read_attempts
                and len(bytes_read) < length
            ):
                chunk = parent_read(length - len(bytes_read))
                if not chunk:
                    break
                bytes_read += chunk
                attempts += 1

            num_bytes = len(bytes_read)
            if num_bytes < length:
                start_pos = self.tell() - num_bytes
                raise TruncatedStreamError(
                    f"Unexpected end of data. Read {num_bytes} bytes of "
                    f"{length} expected",
                    offset=start_pos
                )

        return bytes_read

    def peek(self, length: int) -> bytes:
        """Return up to `length` bytes without moving the position."""
        pos = self.tell()
        try:
            return self.parent_read(length)
        finally:
            self.seek(pos)

    def write_leUS(self, val: int) -> None:
        """Write an unsigned short with little endian byte order"""
        self.write(pack(b"<H", val))

    def write_leUL(self, val: int) -> None:
        """Write an unsigned long with little endian byte order"""
        self.write(pack(b"<L", val))

    def write_beUS(self, val: int) -> None:
        """Write an unsigned short with big endian byte order"""
        self.write(pack(b">H", val))

    def write_beUL(self, val: int) -> None:
        """Write an unsigned long with big endian byte order"""
        self.write(pack(b">L", val))

    @property
    def size(self) -> int:
        """Return the total number of bytes in the underlying buffer."""
        pos = self.tell()
        try:
            return self.seek(0, os.SEEK_END)
        finally:
            self.seek(pos)

    # Big/Little Endian changes functions to read unsigned
    # short or long, e.g. length fields etc
    @property
    def is_little_endian(self) -> bool:
        return self._little_endian

    @is_little_endian.setter
    def is_little_endian(self, value: bool) -> None:
        self._little_endian = value
        if value:
            self.read_US = self.read_leUS
            self.read_UL = self.read_leUL
            self.write_US = self.write_leUS
            self.write_UL = self.write_leUL
            self._read_tag = self.read_le_tag
        else:
            self.read_US = self.read_beUS
            self.read_UL = self.read_beUL
            self.write_US = self.write_beUS
            self.write_UL = self.write_beUL
            self._read_tag = self.read_be_tag

    @property
    def is_implicit_VR(self) -> bool:
        return self._implicit_VR

    @is_implicit_VR.setter
    def is_implicit_VR(self, value: bool) -> None:
        self._implicit_VR = value


class DicomFileLike(DicomIO):
    """Wrap a file-like object in a :class:`DicomIO`."""
    def __init__(self, file_like_obj: BinaryIO, *args: Any,
                 **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.parent = file_like_obj
        self.parent_read = getattr(file_like_obj, "read", self.no_read)
        self.write = getattr(file_like_obj, "write", self.no_write)
        self.seek = getattr(file_like_obj, "seek", self.no_seek)
        self.tell = file_like_obj.tell
        self.close = file_like_obj.close
        self.name = getattr(file_like_obj, 'name', '<no filename>')

    def no_write(self, bytes_read: bytes) -> None:
        """Used for file-like objects where no write is available"""
        raise IOError("This DicomFileLike object has no write() method")

    def no_read(self, bytes_read: Optional[int] = None) -> None:
        """Used for file-like objects where no read is available"""
        raise IOError("This DicomFileLike object has no read() method")

    def no_seek(self, offset: int, from_what: int = os.SEEK_SET) -> None:
        """Used for file-like objects where no seek is available"""
        raise IOError("This DicomFileLike object has no seek() method")

    def __enter__(self) -> "DicomFileLike":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def DicomFile(*args: Any, **kwargs: Any) -> DicomFileLike:
    return DicomFileLike(open(*args, **kwargs))


class DicomBytesIO(DicomFileLike):
    """An in-memory :class:`DicomIO`."""
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(BytesIO(*args, **kwargs))

    def getvalue(self) -> bytes:
        return self.parent.getvalue()
