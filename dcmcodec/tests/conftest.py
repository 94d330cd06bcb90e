# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Fixtures used in different tests."""

import pytest

from dcmcodec import config
from dcmcodec.filewriter import encode_document
from dcmcodec.tests._common import make_document


@pytest.fixture
def document():
    """A :class:`DicomDocument` in explicit VR little endian."""
    return make_document()


@pytest.fixture
def document_bytes():
    """The encoded bytes of the :func:`document` fixture."""
    return encode_document(make_document())


@pytest.fixture
def dicom_dir(tmp_path):
    """A directory tree with three DICOM files, one text file and one
    truncated DICOM file.
    """
    data = encode_document(make_document())
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "b").mkdir()
    (tmp_path / "one.dcm").write_bytes(data)
    (tmp_path / "a" / "two.dcm").write_bytes(data)
    (tmp_path / "a" / "b" / "three.dcm").write_bytes(data)
    (tmp_path / "a" / "notes.txt").write_text("not a DICOM file\n" * 20)
    (tmp_path / "a" / "b" / "truncated.dcm").write_bytes(data[:-3])

    return tmp_path


@pytest.fixture
def enable_debugging():
    debugging = config.debugging
    level = config.logger.level
    config.debug(True, False)
    yield
    config.logger.setLevel(level)
    config.debugging = debugging
