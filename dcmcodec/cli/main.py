# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec command line interface program

Each subcommand is a module within dcmcodec.cli, which
defines an add_subparser(subparsers) function to set argparse
attributes, and does a set_defaults(func=callback_function).
The callback returns the process exit status.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dcmcodec import config
from dcmcodec._version import __version__
from dcmcodec.config import Settings
from dcmcodec.tag import BaseTag, Tag

#: Environment variable holding the default log level name
LOG_LEVEL_ENV = "DCMCODEC_LOG_LEVEL"

subparsers: Optional[argparse._SubParsersAction] = None


def tag_parser(value: str) -> BaseTag:
    """Return the tag for a keyword or a ``GGGG,EEEE`` style string.

    Note: this is used as an argparse 'type' for tag arguments.

    Parameters
    ----------
    value : str
        A DICOM keyword such as ``PatientName``, or a hex tag in one of the
        forms ``(0010,0010)``, ``0010,0010`` or ``00100010``.

    Raises
    ------
    argparse.ArgumentTypeError
        If `value` is neither a known keyword nor a valid tag.
    """
    text = value.strip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]

    try:
        if "," in text:
            group, elem = text.split(",", 1)
            return Tag(group.strip(), elem.strip())

        return Tag(text)
    except (ValueError, OverflowError):
        raise argparse.ArgumentTypeError(
            f"'{value}' is not a DICOM tag or keyword"
        )


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Return the decode settings from the environment and `args`."""
    settings = Settings.from_env()
    changes = {}
    if getattr(args, "strict_vr", False):
        changes["strict_vr"] = True
    if getattr(args, "max_depth", None) is not None:
        changes["max_nesting_depth"] = args.max_depth

    return settings.replace(**changes) if changes else settings


def help_command(args: argparse.Namespace) -> int:
    assert subparsers is not None
    subcommands = list(subparsers.choices.keys())
    if args.subcommand and args.subcommand in subcommands:
        subparsers.choices[args.subcommand].print_help()
    else:
        print("Use dcmcodec help [subcommand] to show help for a subcommand")
        subcommands.remove("help")
        print(f"Available subcommands: {', '.join(subcommands)}")

    return 0


def get_subcommands() -> List:
    """Return the ``add_subparser`` function of each subcommand module."""
    from dcmcodec.cli import scan, show, strip

    return [show.add_subparser, scan.add_subparser, strip.add_subparser]


def _log_level(args: argparse.Namespace) -> str:
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose == 1:
        return "INFO"

    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def main(args: Optional[List[str]] = None) -> int:
    """Entry point for 'dcmcodec' command line interface

    args: list
        Command-line arguments to parse.  If None, then sys.argv is used
    """
    global subparsers

    parser = argparse.ArgumentParser(
        prog="dcmcodec", description="dcmcodec command line utilities"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help=(
            "Log more detail, once for progress and twice for element "
            f"level debugging (default from {LOG_LEVEL_ENV})"
        ),
    )
    parser.add_argument(
        "--strict-vr",
        action="store_true",
        help="Fail on unknown explicit VRs instead of reading them as UN",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum sequence nesting depth to decode",
    )
    subparsers = parser.add_subparsers(help="subcommand help")

    help_parser = subparsers.add_parser(
        "help", help="display help for subcommands"
    )
    help_parser.add_argument(
        "subcommand", nargs="?", help="Subcommand to show help for"
    )
    help_parser.set_defaults(func=help_command)

    # Get subcommands to register themselves as a subparser
    for add_subparser in get_subcommands():
        add_subparser(subparsers)

    parsed = parser.parse_args(args)
    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    previous_level = config.logger.level
    previous_debugging = config.debugging
    try:
        config.set_log_level(_log_level(parsed))
    except ValueError as exc:
        parser.error(str(exc))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    config.logger.addHandler(handler)
    try:
        return parsed.func(parsed)
    finally:
        config.logger.removeHandler(handler)
        config.logger.setLevel(previous_level)
        config.debugging = previous_debugging
