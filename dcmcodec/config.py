# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""dcmcodec configuration options.

Decoding and encoding behaviour is controlled through :class:`Settings`
instances which are passed explicitly to :func:`~dcmcodec.filereader.dcmread`,
:func:`~dcmcodec.filewriter.dcmwrite` and the directory parser. Only the
logging setup lives at module level.
"""

from dataclasses import dataclass, field, replace
import logging
import os
from typing import Optional, Mapping, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from dcmcodec.datadict import TagDictionary


#: Default cap on how deeply sequences may nest before decoding is aborted
MAX_NESTING_DEPTH = 1024

#: Default number of files the directory parser will have open at once
OPEN_FILE_LIMIT = 64

ENV_PREFIX = "DCMCODEC_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Options for a single decode, encode or directory parse.

    Attributes
    ----------
    strict_vr : bool
        If ``True`` an explicit VR code that is not a known VR raises
        :class:`~dcmcodec.errors.UnrecognizedVRError`. If ``False`` (default)
        the element is read as **UN** with a 4 byte length.
    max_nesting_depth : int
        The deepest sequence nesting that will be decoded, default ``1024``.
    open_file_limit : int
        The number of worker threads (and so open files) used by
        :func:`~dcmcodec.parallel.parse_directory`, default ``64``.
    timeout : float or None
        Optional per-file time limit in seconds used when collecting the
        results of a directory parse. ``None`` (default) waits forever.
    dictionary : TagDictionary or None
        The tag dictionary used to look up the VR of elements in implicit VR
        data sets. ``None`` (default) uses the built-in dictionary.
    """
    strict_vr: bool = False
    max_nesting_depth: int = MAX_NESTING_DEPTH
    open_file_limit: int = OPEN_FILE_LIMIT
    timeout: Optional[float] = None
    dictionary: Optional["TagDictionary"] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.max_nesting_depth < 0:
            raise ValueError("'max_nesting_depth' must not be negative")
        if self.open_file_limit < 1:
            raise ValueError("'open_file_limit' must be at least 1")

    @property
    def tag_dictionary(self) -> "TagDictionary":
        """Return the dictionary to use for implicit VR lookups."""
        if self.dictionary is not None:
            return self.dictionary

        from dcmcodec.datadict import default_dictionary
        return default_dictionary

    def replace(self, **changes) -> "Settings":
        """Return a copy of the settings with `changes` applied."""
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "Settings":
        """Return :class:`Settings` populated from environment variables.

        Recognised variables are ``DCMCODEC_STRICT_VR``,
        ``DCMCODEC_MAX_DEPTH``, ``DCMCODEC_OPEN_FILE_LIMIT`` and
        ``DCMCODEC_TIMEOUT``; unset variables keep their defaults.
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        value = environ.get(f"{ENV_PREFIX}STRICT_VR")
        if value is not None:
            kwargs["strict_vr"] = _env_bool(value)

        value = environ.get(f"{ENV_PREFIX}MAX_DEPTH")
        if value is not None:
            kwargs["max_nesting_depth"] = int(value)

        value = environ.get(f"{ENV_PREFIX}OPEN_FILE_LIMIT")
        if value is not None:
            kwargs["open_file_limit"] = int(value)

        value = environ.get(f"{ENV_PREFIX}TIMEOUT")
        if value:
            kwargs["timeout"] = float(value)

        return cls(**kwargs)


default_settings = Settings()
"""The :class:`Settings` used when none are passed to an entry point."""

logger = logging.getLogger('dcmcodec')
logger.addHandler(logging.NullHandler())

debugging: bool
"""``True`` if element level debug logging is enabled, see :func:`debug`."""


def debug(debug_on: bool = True, default_handler: bool = True) -> None:
    """Turn on/off debugging of DICOM data set reading and writing.

    When debugging is on, the file location and details about the elements
    read at that location are logged to the 'dcmcodec' logger using
    Python's :mod:`logging` module.

    Parameters
    ----------
    debug_on : bool, optional
        If ``True`` (default) then turn on debugging, ``False`` to turn off.
    default_handler : bool, optional
        If ``True`` (default) then use :class:`logging.StreamHandler` as the
        handler for log messages.
    """
    global debugging

    if default_handler:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if debug_on:
        logger.setLevel(logging.DEBUG)
        debugging = True
    else:
        logger.setLevel(logging.WARNING)
        debugging = False


def set_log_level(level: str) -> None:
    """Set the level of the 'dcmcodec' logger from a level name.

    Parameters
    ----------
    level : str
        One of ``'DEBUG'``, ``'INFO'``, ``'WARNING'``, ``'ERROR'`` or
        ``'CRITICAL'`` (case insensitive).
    """
    global debugging

    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'")

    logger.setLevel(numeric)
    debugging = numeric <= logging.DEBUG


# force level=WARNING, in case logging default is set differently
debug(False, False)
