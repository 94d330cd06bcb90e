# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Decode every file in a directory tree using a bounded pool of threads.

At most :attr:`~dcmcodec.config.Settings.open_file_limit` files are being
decoded (and so are open) at any one time. Workers never share state, each
one decodes its own file into its own document. The results are collected
in the calling thread, which is the only place the aggregate report is
changed.
"""

from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
import os
from typing import (
    Callable, Deque, Iterable, Iterator, List, Optional, Tuple, Union
)

from dcmcodec.config import Settings, default_settings, logger
from dcmcodec.dataset import DicomDocument
from dcmcodec.errors import DicomError, NotADicomFileError
from dcmcodec.filereader import dcmread


PathType = Union[str, "os.PathLike[str]"]


class ParseStatus(Enum):
    """The outcome of decoding a single file."""
    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class ParseResult:
    """The outcome of decoding a single file.

    Attributes
    ----------
    path : str
        The path of the file.
    status : ParseStatus
        ``OK`` if the file was decoded, ``SKIPPED`` if it isn't a DICOM file
        and ``ERROR`` if decoding failed.
    document : DicomDocument or None
        The decoded document, only kept when requested.
    error : Exception or None
        The reason the file was skipped or failed.
    """
    path: str
    status: ParseStatus
    document: Optional[DicomDocument] = None
    error: Optional[BaseException] = None


@dataclass
class DirectoryReport:
    """The collected results of :func:`parse_directory`."""
    results: List[ParseResult] = field(default_factory=list)

    def _count(self, status: ParseStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def succeeded(self) -> int:
        """Return the number of files decoded without error."""
        return self._count(ParseStatus.OK)

    @property
    def skipped(self) -> int:
        """Return the number of files that weren't DICOM files."""
        return self._count(ParseStatus.SKIPPED)

    @property
    def failed(self) -> int:
        """Return the number of files that couldn't be decoded."""
        return self._count(ParseStatus.ERROR)

    @property
    def total(self) -> int:
        return len(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[ParseResult]:
        return iter(self.results)

    def summary(self) -> str:
        """Return a one line summary of the counts."""
        return (
            f"{self.total} files: {self.succeeded} ok, {self.skipped} "
            f"skipped, {self.failed} failed"
        )


class DirectoryWalkError(Exception):
    """Raised by :func:`walk_directory` after one or more callbacks failed.

    Attributes
    ----------
    errors : list of (str, Exception)
        The path and exception of each failed callback.
    """
    def __init__(self, errors: List[Tuple[str, BaseException]]) -> None:
        self.errors = errors
        path, exc = errors[0]
        msg = (
            f"{len(errors)} callback(s) failed, the first for '{path}': "
            f"{type(exc).__name__}: {exc}"
        )
        super().__init__(msg)


def walk_files(root: PathType) -> Iterator[str]:
    """Yield the path of every regular file under `root`.

    Directories are walked recursively and in sorted order so the same tree
    always gives the same sequence of paths. If `root` is itself a file
    then only `root` is yielded.
    """
    root = os.fspath(root)
    if os.path.isfile(root):
        yield root
        return

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if os.path.isfile(path):
                yield path


def _bounded_map(
    func: Callable[[str], object],
    paths: Iterable[str],
    limit: int,
    timeout: Optional[float] = None,
) -> Iterator[Tuple[str, Future]]:
    """Run `func` on each path with no more than `limit` calls pending.

    Yields ``(path, future)`` in the order the paths were given, once the
    future has finished or `timeout` seconds have passed while waiting on
    it.
    """
    executor = ThreadPoolExecutor(max_workers=limit)
    pending: Deque[Tuple[str, Future]] = deque()
    timed_out = False

    def _collect() -> Tuple[str, Future]:
        nonlocal timed_out
        path, future = pending.popleft()
        try:
            future.exception(timeout=timeout)
        except FutureTimeoutError:
            timed_out = True

        return path, future

    try:
        for path in paths:
            if len(pending) >= limit:
                yield _collect()

            pending.append((path, executor.submit(func, path)))

        while pending:
            yield _collect()
    finally:
        for _, future in pending:
            future.cancel()

        # Timed out workers can't be interrupted, don't block on them
        executor.shutdown(wait=not timed_out)


def walk_directory(
    root: PathType,
    callback: Callable[[str], object],
    max_workers: Optional[int] = None,
) -> None:
    """Call `callback` once for every regular file under `root`.

    The callbacks run concurrently on a pool of `max_workers` threads but
    the function only returns once every callback has finished. A failing
    callback doesn't stop the others.

    Parameters
    ----------
    root : str or PathLike
        The directory to walk.
    callback : callable
        Called with the path of each file.
    max_workers : int, optional
        The number of callbacks that may run at once, default
        :attr:`~dcmcodec.config.Settings.open_file_limit`.

    Raises
    ------
    DirectoryWalkError
        If any of the callbacks raised an exception.
    """
    if max_workers is None:
        max_workers = default_settings.open_file_limit

    if max_workers < 1:
        raise ValueError("'max_workers' must be at least 1")

    errors = []
    for path, future in _bounded_map(callback, walk_files(root), max_workers):
        exc = future.exception()
        if exc is not None:
            logger.error(f"Callback failed for '{path}': {exc}")
            errors.append((path, exc))

    if errors:
        raise DirectoryWalkError(errors)


def _parse_file(
    path: str, settings: Settings, keep_document: bool
) -> ParseResult:
    """Decode a single file into a :class:`ParseResult`."""
    try:
        document = dcmread(path, settings=settings)
    except NotADicomFileError as exc:
        logger.debug(f"Skipping '{path}': {exc}")
        return ParseResult(path, ParseStatus.SKIPPED, error=exc)
    except (DicomError, OSError) as exc:
        logger.warning(f"Unable to decode '{path}': {exc}")
        return ParseResult(path, ParseStatus.ERROR, error=exc)
    except Exception as exc:
        logger.exception(f"Unexpected error decoding '{path}'")
        return ParseResult(path, ParseStatus.ERROR, error=exc)

    return ParseResult(
        path, ParseStatus.OK, document if keep_document else None
    )


def parse_directory(
    source: Union[PathType, Iterable[PathType]],
    settings: Optional[Settings] = None,
    on_result: Optional[Callable[[ParseResult], None]] = None,
    keep_documents: bool = False,
) -> DirectoryReport:
    """Decode every file in a directory tree.

    Every file gets exactly one :class:`ParseResult` in the returned
    report, in the order the files were found. A file without the *DICM*
    prefix is ``SKIPPED``, a file that can't be decoded is an ``ERROR``;
    neither stops the remaining files from being decoded.

    Parameters
    ----------
    source : str, PathLike or iterable of them
        The directory to walk, or the paths of the files to decode.
    settings : config.Settings, optional
        The decode settings, the ``open_file_limit`` is the number of files
        decoded at once and ``timeout`` (if set) is how long to wait on a
        single file before reporting it as an ``ERROR``.
    on_result : callable, optional
        Called in the calling thread with each result as it is collected.
    keep_documents : bool, optional
        If ``True`` then keep the decoded documents in the results, default
        ``False``.

    Returns
    -------
    DirectoryReport
        The results for every file.
    """
    settings = settings or default_settings
    if isinstance(source, (str, os.PathLike)):
        paths: Iterable[str] = walk_files(source)
    else:
        paths = (os.fspath(p) for p in source)

    def _parse(path: str) -> ParseResult:
        return _parse_file(path, settings, keep_documents)

    report = DirectoryReport()
    results = _bounded_map(
        _parse, paths, settings.open_file_limit, settings.timeout
    )
    for path, future in results:
        if future.done():
            result = future.result()
        else:
            msg = f"Timed out after {settings.timeout} seconds"
            logger.warning(f"Unable to decode '{path}': {msg}")
            result = ParseResult(
                path, ParseStatus.ERROR, error=TimeoutError(msg)
            )

        report.results.append(result)
        if on_result is not None:
            on_result(result)

    logger.info(report.summary())

    return report
