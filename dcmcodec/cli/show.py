# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec command line interface program for `dcmcodec show`"""

import argparse
import sys
from typing import List, Optional

from dcmcodec.cli.main import settings_from_args, tag_parser
from dcmcodec.dataset import Dataset, DicomDocument, describe_elements
from dcmcodec.errors import DicomError
from dcmcodec.filereader import dcmread
from dcmcodec.uid import UID


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    subparser = subparsers.add_parser(
        "show", description="Display all or part of a DICOM file"
    )
    subparser.add_argument("filename", help="The DICOM file to display")
    subparser.add_argument(
        "-e",
        "--element",
        type=tag_parser,
        help="Only show the element with this keyword or tag",
    )
    subparser.add_argument(
        "-x",
        "--exclude-private",
        help="Don't show private data elements",
        action="store_true",
    )
    subparser.add_argument(
        "-t", "--top", help="Only show top level", action="store_true"
    )
    subparser.add_argument(
        "-s",
        "--sort",
        help="Show elements in tag order rather than file order",
        action="store_true",
    )
    subparser.add_argument(
        "-q",
        "--quiet",
        help="Only show basic information",
        action="store_true",
    )

    subparser.set_defaults(func=do_command)


def _value(ds: Dataset, keyword: str) -> str:
    elem = ds.get(keyword)
    if elem is None:
        return "N/A"

    value = elem.python_value(ds.character_set)
    return "N/A" if value is None else str(value)


def sop_class_name(ds: Dataset) -> Optional[str]:
    elem = ds.get("SOPClassUID")
    if elem is None:
        return None

    return f"SOPClassUID: {UID(elem.python_value() or '').name}"


def quiet_image(ds: Dataset) -> Optional[str]:
    if "Rows" not in ds or "Columns" not in ds:
        return None

    results = [
        _value(ds, name)
        for name in ["BitsStored", "Modality", "Rows", "Columns",
                     "SliceLocation"]
    ]
    return "Image: {}-bit {} {}x{} pixels Slice location: {}".format(
        *results
    )


# Items to show in quiet mode
# Item can be a callable or a DICOM keyword
quiet_items = [
    sop_class_name,
    "PatientName",
    "PatientID",
    "StudyID",
    "StudyDate",
    "StudyTime",
    "StudyDescription",
    quiet_image,
]


def show_quiet(ds: Dataset) -> List[str]:
    lines = []
    for item in quiet_items:
        if callable(item):
            result = item(ds)
            if result:
                lines.append(result)
        else:
            lines.append(f"{item}: {_value(ds, item)}")

    return lines


def describe(args: argparse.Namespace, doc: DicomDocument) -> List[str]:
    """Return the lines to print for the decoded `doc`."""
    if args.quiet:
        return show_quiet(doc.dataset)

    if args.element is not None:
        elem = doc.lookup(args.element)
        if elem is None:
            raise KeyError(args.element)
        elements = [elem]
    else:
        elements = doc.all_elements()

    if args.exclude_private:
        elements = [e for e in elements if not e.tag.is_private]

    if args.sort:
        elements = sorted(elements, key=lambda e: e.tag)

    if args.top:
        return [str(e) for e in elements]

    return describe_elements(elements)


def do_command(args: argparse.Namespace) -> int:
    try:
        doc = dcmread(args.filename, settings=settings_from_args(args))
    except (DicomError, OSError) as exc:
        print(f"Error reading '{args.filename}': {exc}", file=sys.stderr)
        return 1

    try:
        lines = describe(args, doc)
    except KeyError:
        print(
            f"Element {args.element} is not in '{args.filename}'",
            file=sys.stderr
        )
        return 1

    print("\n".join(lines))
    return 0
