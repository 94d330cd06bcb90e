# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec package -- decode and encode DICOM Part 10 data sets.
   See Quick Start below.

-----------
Quick Start
-----------

1. Read a file, look up an element and write the document back out::

    from dcmcodec import dcmread, dcmwrite
    doc = dcmread("file1.dcm")
    print(doc.lookup("PatientName").python_value())
    dcmwrite("file2.dcm", doc)

2. Decode every file under a directory, a few files at a time::

    from dcmcodec.parallel import parse_directory
    report = parse_directory("/path/to/studies")
    print(report.summary())

3. Decoding problems raise a subclass of :class:`~dcmcodec.errors.DicomError`
   carrying the byte offset where the problem was found.

"""

from dcmcodec.config import Settings
from dcmcodec.dataelem import DataElement
from dcmcodec.dataset import Dataset, DicomDocument, Item
from dcmcodec.errors import DicomError, NotADicomFileError
from dcmcodec.filereader import dcmread
from dcmcodec.filewriter import dcmwrite
from dcmcodec.sequence import Sequence
from dcmcodec.tag import Tag

from ._version import __version__, __version_info__

__all__ = [
    "DataElement",
    "Dataset",
    "DicomDocument",
    "DicomError",
    "Item",
    "NotADicomFileError",
    "Sequence",
    "Settings",
    "Tag",
    "dcmread",
    "dcmwrite",
    "__version__",
    "__version_info__",
]
