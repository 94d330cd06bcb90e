# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Tests for the bounded concurrency directory parser."""

import os
import threading

import pytest

from dcmcodec import parallel
from dcmcodec.config import Settings
from dcmcodec.dataset import DicomDocument
from dcmcodec.errors import NotADicomFileError, TruncatedStreamError
from dcmcodec.parallel import (
    DirectoryReport, DirectoryWalkError, ParseResult, ParseStatus,
    parse_directory, walk_directory, walk_files,
)


def _expected_paths(root):
    return [
        os.path.join(root, "one.dcm"),
        os.path.join(root, "a", "notes.txt"),
        os.path.join(root, "a", "two.dcm"),
        os.path.join(root, "a", "b", "three.dcm"),
        os.path.join(root, "a", "b", "truncated.dcm"),
    ]


class TestWalkFiles:
    def test_sorted_walk(self, dicom_dir):
        """Files are yielded directory by directory in sorted order"""
        assert _expected_paths(str(dicom_dir)) == list(walk_files(dicom_dir))

    def test_single_file(self, dicom_dir):
        path = str(dicom_dir / "one.dcm")
        assert [path] == list(walk_files(path))

    def test_empty(self, tmp_path):
        assert [] == list(walk_files(tmp_path))

    def test_missing(self, tmp_path):
        assert [] == list(walk_files(tmp_path / "missing"))


class TestDirectoryReport:
    def test_counts(self):
        report = DirectoryReport([
            ParseResult("a", ParseStatus.OK),
            ParseResult("b", ParseStatus.SKIPPED),
            ParseResult("c", ParseStatus.ERROR),
            ParseResult("d", ParseStatus.OK),
        ])
        assert 2 == report.succeeded
        assert 1 == report.skipped
        assert 1 == report.failed
        assert 4 == report.total == len(report)
        assert ["a", "b", "c", "d"] == [r.path for r in report]
        assert "4 files: 2 ok, 1 skipped, 1 failed" == report.summary()

    def test_empty(self):
        assert "0 files: 0 ok, 0 skipped, 0 failed" == (
            DirectoryReport().summary()
        )


class TestParseDirectory:
    def test_parse(self, dicom_dir, caplog):
        """Every file gets exactly one result, in the order found"""
        with caplog.at_level('INFO', logger='dcmcodec'):
            report = parse_directory(dicom_dir)

        assert _expected_paths(str(dicom_dir)) == [r.path for r in report]
        assert [
            ParseStatus.OK,
            ParseStatus.SKIPPED,
            ParseStatus.OK,
            ParseStatus.OK,
            ParseStatus.ERROR,
        ] == [r.status for r in report]
        assert 3 == report.succeeded
        assert 1 == report.skipped
        assert 1 == report.failed
        assert isinstance(report.results[1].error, NotADicomFileError)
        assert isinstance(report.results[4].error, TruncatedStreamError)
        assert report.results[0].error is None
        assert report.results[0].document is None
        assert "5 files: 3 ok, 1 skipped, 1 failed" in caplog.text
        assert "Unable to decode" in caplog.text

    @pytest.mark.parametrize('workers', [1, 2, 4, 64])
    def test_fewer_workers_than_files(self, dicom_dir, workers):
        settings = Settings(open_file_limit=workers)
        report = parse_directory(dicom_dir, settings)
        assert 5 == report.total
        assert 3 == report.succeeded

    def test_many_files(self, tmp_path, document_bytes):
        for ii in range(40):
            (tmp_path / f"{ii:02d}.dcm").write_bytes(document_bytes)

        report = parse_directory(tmp_path, Settings(open_file_limit=3))
        assert 40 == report.succeeded
        assert [f"{ii:02d}.dcm" for ii in range(40)] == [
            os.path.basename(r.path) for r in report
        ]

    def test_keep_documents(self, dicom_dir):
        report = parse_directory(dicom_dir, keep_documents=True)
        doc = report.results[0].document
        assert isinstance(doc, DicomDocument)
        assert '12345' == doc['PatientID'].python_value()
        assert str(dicom_dir / "one.dcm") == doc.filename
        assert report.results[1].document is None

    def test_on_result(self, dicom_dir):
        """The callback runs in the calling thread, once per file"""
        seen = []
        caller = threading.get_ident()

        def on_result(result):
            seen.append((result.path, threading.get_ident()))

        report = parse_directory(dicom_dir, on_result=on_result)
        assert [r.path for r in report] == [path for path, _ in seen]
        assert {caller} == {ident for _, ident in seen}

    def test_path_list(self, dicom_dir):
        paths = [dicom_dir / "one.dcm", str(dicom_dir / "missing.dcm")]
        report = parse_directory(paths)
        assert [ParseStatus.OK, ParseStatus.ERROR] == [
            r.status for r in report
        ]
        assert isinstance(report.results[1].error, FileNotFoundError)
        assert str(dicom_dir / "one.dcm") == report.results[0].path

    def test_empty_directory(self, tmp_path):
        assert 0 == parse_directory(tmp_path).total

    def test_settings_used(self, dicom_dir):
        """The decode settings reach each file"""
        report = parse_directory(dicom_dir, Settings(max_nesting_depth=0))
        assert 0 == report.succeeded
        assert 4 == report.failed

    def test_unexpected_error(self, dicom_dir, monkeypatch, caplog):
        def bad_read(path, settings=None):
            raise RuntimeError("Something unexpected")

        monkeypatch.setattr(parallel, "dcmread", bad_read)
        with caplog.at_level('ERROR', logger='dcmcodec'):
            report = parse_directory(dicom_dir)

        assert 5 == report.failed
        assert isinstance(report.results[0].error, RuntimeError)
        assert "Unexpected error decoding" in caplog.text

    def test_timeout(self, tmp_path, monkeypatch):
        """A file that takes too long is reported as an error"""
        release = threading.Event()

        def slow_read(path, settings=None):
            if path.endswith("slow.dcm"):
                release.wait(10)
            return DicomDocument()

        monkeypatch.setattr(parallel, "dcmread", slow_read)
        paths = [str(tmp_path / "slow.dcm"), str(tmp_path / "fast.dcm")]
        try:
            report = parse_directory(
                paths, Settings(open_file_limit=2, timeout=0.1)
            )
        finally:
            release.set()

        assert [ParseStatus.ERROR, ParseStatus.OK] == [
            r.status for r in report
        ]
        error = report.results[0].error
        assert isinstance(error, TimeoutError)
        assert "Timed out after 0.1 seconds" == str(error)


class TestWalkDirectory:
    def test_callback_per_file(self, dicom_dir):
        seen = []
        lock = threading.Lock()

        def callback(path):
            with lock:
                seen.append(path)

        walk_directory(dicom_dir, callback, max_workers=2)
        assert sorted(_expected_paths(str(dicom_dir))) == sorted(seen)

    def test_callback_errors(self, dicom_dir, caplog):
        """A failing callback doesn't stop the others"""
        seen = []
        lock = threading.Lock()

        def callback(path):
            if path.endswith(".txt"):
                raise ValueError("Not a DICOM file")
            with lock:
                seen.append(path)

        with caplog.at_level('ERROR', logger='dcmcodec'):
            with pytest.raises(DirectoryWalkError) as exc_info:
                walk_directory(dicom_dir, callback)

        assert 4 == len(seen)
        errors = exc_info.value.errors
        assert 1 == len(errors)
        path, exc = errors[0]
        assert path.endswith("notes.txt")
        assert isinstance(exc, ValueError)
        assert "1 callback(s) failed" in str(exc_info.value)
        assert "ValueError: Not a DICOM file" in str(exc_info.value)
        assert "Callback failed for" in caplog.text

    def test_invalid_workers(self, dicom_dir):
        with pytest.raises(ValueError, match="at least 1"):
            walk_directory(dicom_dir, print, max_workers=0)
