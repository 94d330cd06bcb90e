# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec command line interface program for `dcmcodec scan`"""

import argparse

from dcmcodec.cli.main import settings_from_args
from dcmcodec.parallel import ParseResult, ParseStatus, parse_directory


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    subparser = subparsers.add_parser(
        "scan",
        description=(
            "Decode every file in a directory tree and report the outcome "
            "for each"
        ),
    )
    subparser.add_argument("directory", help="The directory to scan")
    subparser.add_argument(
        "-j",
        "--jobs",
        type=int,
        help="Number of files to decode at once",
    )
    subparser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait on a single file before giving up on it",
    )
    subparser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Also list skipped (non-DICOM) files",
    )

    subparser.set_defaults(func=do_command)


def format_result(result: ParseResult) -> str:
    line = f"{result.status.value.upper():<7} {result.path}"
    if result.status is ParseStatus.ERROR:
        line += f": {result.error}"

    return line


def do_command(args: argparse.Namespace) -> int:
    settings = settings_from_args(args)
    if args.jobs is not None:
        settings = settings.replace(open_file_limit=args.jobs)
    if args.timeout is not None:
        settings = settings.replace(timeout=args.timeout)

    def _show(result: ParseResult) -> None:
        if result.status is not ParseStatus.SKIPPED or args.all:
            print(format_result(result))

    report = parse_directory(args.directory, settings, on_result=_show)
    print(report.summary())

    return 1 if report.failed else 0
