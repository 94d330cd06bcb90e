# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec command line interface program for `dcmcodec strip`

Removes top level elements from a file by cutting their encoded bytes out
of the original data, leaving every other byte as it was.
"""

import argparse
import sys

from dcmcodec.cli.main import settings_from_args, tag_parser
from dcmcodec.errors import DicomError
from dcmcodec.filereader import dcmread
from dcmcodec.fileutil import remove_element_bytes


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    subparser = subparsers.add_parser(
        "strip", description="Remove top level elements from a DICOM file"
    )
    subparser.add_argument("filename", help="The DICOM file to read")
    subparser.add_argument(
        "tags",
        nargs="+",
        type=tag_parser,
        help="Keywords or tags of the elements to remove",
    )
    subparser.add_argument(
        "-o",
        "--output",
        required=True,
        help="Where to write the stripped file",
    )

    subparser.set_defaults(func=do_command)


def do_command(args: argparse.Namespace) -> int:
    try:
        with open(args.filename, "rb") as f:
            data = f.read()
        doc = dcmread(data, settings=settings_from_args(args))
    except (DicomError, OSError) as exc:
        print(f"Error reading '{args.filename}': {exc}", file=sys.stderr)
        return 1

    if doc.transfer_syntax is not None and doc.transfer_syntax.is_deflated:
        print(
            "Elements can't be stripped from a deflated data set",
            file=sys.stderr
        )
        return 1

    elements = []
    for tag in dict.fromkeys(args.tags):
        if tag.group == 0x0002:
            print(
                f"Element {tag} is part of the File Meta Information and "
                "can't be stripped",
                file=sys.stderr
            )
            return 1

        elem = doc.dataset.get(tag)
        if elem is None:
            print(f"Element {tag} not found, ignoring it", file=sys.stderr)
            continue
        elements.append(elem)

    # Cut from the end so earlier offsets stay valid
    for elem in sorted(elements, key=lambda e: e.file_tell, reverse=True):
        data = remove_element_bytes(data, elem)

    with open(args.output, "wb") as f:
        f.write(data)

    print(f"Removed {len(elements)} element(s), wrote '{args.output}'")
    return 0
