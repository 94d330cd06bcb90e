# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Test for filebase.py"""

from io import BytesIO

import pytest

from dcmcodec.errors import TruncatedStreamError
from dcmcodec.filebase import DicomIO, DicomBytesIO, DicomFileLike, DicomFile


class TestDicomIO:
    """Test filebase.DicomIO class"""
    def test_init(self):
        """Test __init__"""
        fp = DicomIO()
        assert not fp.is_implicit_VR
        assert fp.is_little_endian

    def test_read_tag(self):
        """Test DicomIO.read_tag indirectly"""
        # Tags are 2 + 2 = 4 bytes
        bytestream = b'\x01\x02\x03\x04\x05\x06'
        # Little endian
        fp = DicomBytesIO(bytestream)
        fp.is_little_endian = True
        assert 0x02010403 == fp.read_tag()

        # Big endian
        fp = DicomBytesIO(bytestream)
        fp.is_little_endian = False
        assert 0x01020304 == fp.read_tag()

    def test_write_tag(self):
        """Test DicomIO.write_tag indirectly"""
        tag = 0x01020304

        # Little endian
        fp = DicomBytesIO()
        fp.is_little_endian = True
        fp.write_tag(tag)
        assert b'\x02\x01\x04\x03' == fp.getvalue()

        # Big endian
        fp = DicomBytesIO()
        fp.is_little_endian = False
        fp.write_tag('PatientName')
        assert b'\x00\x10\x00\x10' == fp.getvalue()

    def test_read_us(self):
        """Test DicomIO.read_leUS and read_beUS"""
        # unsigned short are 2 bytes
        bytestream = b'\x00\xFF\x00\xFE'

        # Little endian
        fp = DicomBytesIO(bytestream)
        assert 0xFF00 == fp.read_leUS()
        assert 0xFE00 == fp.read_leUS()

        # Big endian
        fp = DicomBytesIO(bytestream)
        assert 0x00FF == fp.read_beUS()
        assert 0x00FE == fp.read_beUS()

    def test_read_ul(self):
        """Test DicomIO.read_leUL and read_beUL"""
        # unsigned long are 4 bytes
        bytestream = b'\x00\x00\x00\xFF\x00\x00\x00\xFE'

        # Little endian
        fp = DicomBytesIO(bytestream)
        assert 0xFF000000 == fp.read_leUL()
        assert 0xFE000000 == fp.read_leUL()

        # Big endian
        fp = DicomBytesIO(bytestream)
        assert 0x000000FF == fp.read_beUL()
        assert 0x000000FE == fp.read_beUL()

    def test_endian_switches_helpers(self):
        fp = DicomBytesIO(b'\x00\x01\x00\x01')
        fp.is_little_endian = False
        assert 1 == fp.read_US()
        fp.is_little_endian = True
        assert 0x0100 == fp.read_US()

    def test_read(self):
        """Test DicomIO.read entire length"""
        fp = DicomBytesIO(b'\x00\x01\x03')
        bytestream = fp.read(length=None, need_exact_length=False)
        assert b'\x00\x01\x03' == bytestream

    def test_read_length(self):
        """Test DicomIO.read specific length"""
        fp = DicomBytesIO(b'\x00\x01\x03')
        bytestream = fp.read(length=2, need_exact_length=False)
        assert b'\x00\x01' == bytestream

    def test_read_exact_length_raises(self):
        """Test DicomIO.read exact length raises if short"""
        fp = DicomBytesIO(b'\x00\x01\x03')
        fp.read(1)
        with pytest.raises(TruncatedStreamError) as exc_info:
            fp.read(length=4, need_exact_length=True)

        assert "Read 2 bytes of 4 expected" in str(exc_info.value)
        assert 1 == exc_info.value.offset

    def test_read_short_not_exact(self):
        fp = DicomBytesIO(b'\x00\x01\x03')
        assert b'\x00\x01\x03' == fp.read(length=4)

    def test_read_exact_retry(self):
        """A short read is retried before giving up"""
        class ChunkedIO(BytesIO):
            def read(self, size=-1):
                return super().read(min(size, 2) if size > 0 else size)

        fp = DicomFileLike(ChunkedIO(b'\x00\x01\x02\x03\x04\x05'))
        assert b'\x00\x01\x02\x03\x04' == fp.read(5, need_exact_length=True)

    def test_peek(self):
        fp = DicomBytesIO(b'\x00\x01\x03')
        fp.read(1)
        assert b'\x01\x03' == fp.peek(4)
        assert 1 == fp.tell()

    def test_size(self):
        fp = DicomBytesIO(b'\x00\x01\x03\x04')
        fp.read(3)
        assert 4 == fp.size
        assert 3 == fp.tell()


class TestDicomBytesIO:
    """Test filebase.DicomBytesIO class"""
    def test_getvalue(self):
        """Test DicomBytesIO.getvalue"""
        fp = DicomBytesIO(b'\x00\x01\x00\x02')
        assert b'\x00\x01\x00\x02' == fp.getvalue()

    def test_write_read(self):
        fp = DicomBytesIO()
        fp.write_leUL(0x01020304)
        fp.write_beUS(0x0506)
        fp.seek(0)
        assert 0x01020304 == fp.read_leUL()
        assert 0x0506 == fp.read_beUS()
        assert '<no filename>' == fp.name


class TestDicomFile:
    """Test filebase.DicomFile() function"""
    def test_read(self, tmp_path):
        """Test the function"""
        path = tmp_path / 'test.dcm'
        path.write_bytes(b'\x01\x00\x02\x00')
        with DicomFile(str(path), 'rb') as fp:
            assert not fp.parent.closed
            assert str(path) == fp.name
            assert 0x00010002 == fp.read_tag()

        assert fp.parent.closed


class TestDicomFileLike:
    def test_no_methods(self):
        class Reader:
            def tell(self):
                return 0

            def close(self):
                pass

        fp = DicomFileLike(Reader())
        with pytest.raises(IOError, match="no write"):
            fp.write(b'\x00')
        with pytest.raises(IOError, match="no read"):
            fp.read(1)
        with pytest.raises(IOError, match="no seek"):
            fp.seek(0)
