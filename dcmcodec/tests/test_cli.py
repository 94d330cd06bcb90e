# Copyright 2020-2024 dcmcodec authors. See LICENSE file for details.
"""Tests for command-line interface"""

import argparse
import logging

import pytest

from dcmcodec import config
from dcmcodec._version import __version__
from dcmcodec.cli.main import main, settings_from_args, tag_parser
from dcmcodec.dataelem import DataElement
from dcmcodec.filereader import dcmread
from dcmcodec.filewriter import encode_document
from dcmcodec.tests._common import make_document
from dcmcodec.uid import DeflatedExplicitVRLittleEndian


@pytest.fixture
def dicom_file(tmp_path, document_bytes):
    path = tmp_path / "test.dcm"
    path.write_bytes(document_bytes)
    return str(path)


class TestTagParser:
    @pytest.mark.parametrize(
        'value', ['PatientName', '(0010,0010)', '0010,0010', '00100010',
                  ' (0010, 0010) ']
    )
    def test_forms(self, value):
        assert 0x00100010 == tag_parser(value)

    @pytest.mark.parametrize(
        'value', ['NotAKeyword', '(0010,0010', '0010,XXXX', '1,2,3',
                  '(10000,0010)']
    )
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError, match="not a DICOM"):
            tag_parser(value)


class TestSettingsFromArgs:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv('DCMCODEC_STRICT_VR', raising=False)
        monkeypatch.delenv('DCMCODEC_MAX_DEPTH', raising=False)
        settings = settings_from_args(argparse.Namespace())
        assert not settings.strict_vr
        assert 1024 == settings.max_nesting_depth

    def test_args_override_env(self, monkeypatch):
        monkeypatch.setenv('DCMCODEC_MAX_DEPTH', '12')
        monkeypatch.setenv('DCMCODEC_OPEN_FILE_LIMIT', '3')
        args = argparse.Namespace(strict_vr=True, max_depth=5)
        settings = settings_from_args(args)
        assert settings.strict_vr
        assert 5 == settings.max_nesting_depth
        assert 3 == settings.open_file_limit


class TestCLIcall:
    """Test the command-line interface calls"""
    def test_bare_command(self, capsys):
        """Test the bare command prints the usage"""
        assert 0 == main([])
        out, _ = capsys.readouterr()
        assert out.startswith("usage: dcmcodec [-h]")

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert 0 == exc_info.value.code
        out, _ = capsys.readouterr()
        assert f"dcmcodec {__version__}" in out

    def test_unknown_subcommand(self, capsys):
        with pytest.raises(SystemExit):
            main(["unknown"])

        _, err = capsys.readouterr()
        assert "invalid choice" in err

    def test_help(self, capsys):
        """Test the help command prints the available subcommands"""
        assert 0 == main(["help"])
        out, _ = capsys.readouterr()
        assert "Available subcommands: show, scan, strip" in out

    def test_help_subcommand(self, capsys):
        assert 0 == main(["help", "show"])
        out, _ = capsys.readouterr()
        assert out.startswith("usage: dcmcodec show")

    def test_logging_restored(self, dicom_file):
        level = config.logger.level
        handlers = list(config.logger.handlers)
        assert 0 == main(["-vv", "show", "-q", dicom_file])
        assert level == config.logger.level
        assert handlers == config.logger.handlers
        assert not config.debugging

    def test_log_level_from_env(self, dicom_dir, monkeypatch, capsys):
        monkeypatch.setenv("DCMCODEC_LOG_LEVEL", "info")
        main(["scan", str(dicom_dir)])
        _, err = capsys.readouterr()
        assert "INFO: 5 files: 3 ok, 1 skipped, 1 failed" in err

    def test_bad_log_level(self, dicom_file, monkeypatch, capsys):
        monkeypatch.setenv("DCMCODEC_LOG_LEVEL", "loud")
        with pytest.raises(SystemExit):
            main(["show", dicom_file])

        _, err = capsys.readouterr()
        assert "Unknown log level 'loud'" in err


class TestShow:
    def test_show(self, dicom_file, capsys):
        assert 0 == main(["show", dicom_file])
        out, _ = capsys.readouterr()
        assert "Dataset" not in out
        assert "(0002,0010) Transfer Syntax UID" in out
        assert "(0010,0010) Patient's Name" in out
        assert "'CITIZEN^Joan'" in out
        assert "   (0008,1155) Referenced SOP Instance UID" in out
        assert "   ---------" in out

    def test_show_element(self, dicom_file, capsys):
        assert 0 == main(["show", "-e", "PatientID", dicom_file])
        out, _ = capsys.readouterr()
        assert 1 == len(out.splitlines())
        assert out.startswith("(0010,0020) Patient ID")
        assert out.rstrip().endswith("'12345'")

    def test_show_missing_element(self, dicom_file, capsys):
        assert 1 == main(["show", "-e", "(0010,0040)", dicom_file])
        out, err = capsys.readouterr()
        assert "" == out
        assert f"Element (0010,0040) is not in '{dicom_file}'" in err

    def test_show_bad_element(self, dicom_file, capsys):
        with pytest.raises(SystemExit):
            main(["show", "-e", "NotAKeyword", dicom_file])

        _, err = capsys.readouterr()
        assert "'NotAKeyword' is not a DICOM tag or keyword" in err

    def test_show_top(self, dicom_file, capsys):
        assert 0 == main(["show", "--top", dicom_file])
        out, _ = capsys.readouterr()
        lines = out.splitlines()
        doc = dcmread(dicom_file)
        assert len(doc.all_elements()) == len(lines)
        assert "---------" not in out
        assert "(0008,1140) Referenced Image Sequence" in out

    def test_show_sorted(self, dicom_file, capsys):
        assert 0 == main(["show", "-t", "-s", dicom_file])
        out, _ = capsys.readouterr()
        tags = [line[:11] for line in out.splitlines()]
        assert sorted(tags) == tags

    def test_show_exclude_private(self, tmp_path, capsys):
        doc = make_document()
        doc.dataset.add(DataElement.from_value(0x00090010, 'LO', 'ACME'))
        path = tmp_path / "private.dcm"
        path.write_bytes(encode_document(doc))

        assert 0 == main(["show", "-t", str(path)])
        out, _ = capsys.readouterr()
        assert "(0009,0010)" in out

        assert 0 == main(["show", "-t", "-x", str(path)])
        out, _ = capsys.readouterr()
        assert "(0009,0010)" not in out

    def test_show_quiet(self, dicom_file, capsys):
        assert 0 == main(["show", "-q", dicom_file])
        out, _ = capsys.readouterr()
        assert [
            "SOPClassUID: Secondary Capture Image Storage",
            "PatientName: CITIZEN^Joan",
            "PatientID: 12345",
            "StudyID: N/A",
            "StudyDate: 20200101",
            "StudyTime: N/A",
            "StudyDescription: N/A",
            "Image: 8-bit OT 2x2 pixels Slice location: N/A",
        ] == out.splitlines()

    def test_show_not_dicom(self, tmp_path, capsys):
        path = tmp_path / "notes.txt"
        path.write_text("not a DICOM file\n" * 20)
        assert 1 == main(["show", str(path)])
        _, err = capsys.readouterr()
        assert f"Error reading '{path}'" in err
        assert "'DICM' prefix is missing" in err

    def test_show_missing_file(self, tmp_path, capsys):
        assert 1 == main(["show", str(tmp_path / "missing.dcm")])
        _, err = capsys.readouterr()
        assert "Error reading" in err

    def test_show_max_depth(self, dicom_file, capsys):
        assert 1 == main(["--max-depth", "0", "show", dicom_file])
        _, err = capsys.readouterr()
        assert "Error reading" in err


class TestScan:
    def test_scan(self, dicom_dir, capsys):
        assert 1 == main(["scan", "-j", "2", str(dicom_dir)])
        out, _ = capsys.readouterr()
        lines = out.splitlines()
        assert 5 == len(lines)
        assert f"OK      {dicom_dir / 'one.dcm'}" == lines[0]
        assert lines[3].startswith(
            f"ERROR   {dicom_dir / 'a' / 'b' / 'truncated.dcm'}: "
        )
        assert "5 files: 3 ok, 1 skipped, 1 failed" == lines[-1]
        assert "notes.txt" not in out

    def test_scan_all(self, dicom_dir, capsys):
        main(["scan", "--all", str(dicom_dir)])
        out, _ = capsys.readouterr()
        assert f"SKIPPED {dicom_dir / 'a' / 'notes.txt'}" in out.splitlines()

    def test_scan_success(self, tmp_path, document_bytes, capsys):
        (tmp_path / "one.dcm").write_bytes(document_bytes)
        (tmp_path / "notes.txt").write_text("not a DICOM file\n" * 20)
        assert 0 == main(["scan", "--timeout", "30", str(tmp_path)])
        out, _ = capsys.readouterr()
        assert "2 files: 1 ok, 1 skipped, 0 failed" in out


class TestStrip:
    def test_strip(self, dicom_file, tmp_path, capsys):
        out_path = str(tmp_path / "out.dcm")
        args = ["strip", dicom_file, "PatientID", "(0008,0060)", "-o",
                out_path]
        assert 0 == main(args)
        out, _ = capsys.readouterr()
        assert f"Removed 2 element(s), wrote '{out_path}'" in out

        original = dcmread(dicom_file)
        stripped = dcmread(out_path)
        assert 'PatientID' not in stripped
        assert 'Modality' not in stripped
        assert len(original.dataset) - 2 == len(stripped.dataset)
        assert original['PixelData'] == stripped['PixelData']

    def test_strip_repeated_tag(self, dicom_file, tmp_path, capsys):
        out_path = str(tmp_path / "out.dcm")
        args = ["strip", dicom_file, "PatientID", "00100020", "-o", out_path]
        assert 0 == main(args)
        out, _ = capsys.readouterr()
        assert "Removed 1 element(s)" in out
        assert len(dcmread(dicom_file).dataset) - 1 == len(
            dcmread(out_path).dataset
        )

    def test_strip_missing(self, dicom_file, tmp_path, capsys):
        out_path = str(tmp_path / "out.dcm")
        assert 0 == main(["strip", dicom_file, "PatientSex", "-o", out_path])
        out, err = capsys.readouterr()
        assert "Element (0010,0040) not found, ignoring it" in err
        assert "Removed 0 element(s)" in out
        with open(dicom_file, "rb") as f, open(out_path, "rb") as g:
            assert f.read() == g.read()

    def test_strip_file_meta(self, dicom_file, tmp_path, capsys):
        out_path = tmp_path / "out.dcm"
        args = ["strip", dicom_file, "TransferSyntaxUID", "-o", str(out_path)]
        assert 1 == main(args)
        _, err = capsys.readouterr()
        assert "part of the File Meta Information" in err
        assert not out_path.exists()

    def test_strip_deflated(self, tmp_path, capsys):
        path = tmp_path / "deflated.dcm"
        doc = make_document(DeflatedExplicitVRLittleEndian)
        path.write_bytes(encode_document(doc))
        out_path = tmp_path / "out.dcm"
        assert 1 == main(
            ["strip", str(path), "PatientID", "-o", str(out_path)]
        )
        _, err = capsys.readouterr()
        assert "deflated" in err
        assert not out_path.exists()

    def test_strip_requires_output(self, dicom_file, capsys):
        with pytest.raises(SystemExit):
            main(["strip", dicom_file, "PatientID"])

        _, err = capsys.readouterr()
        assert "-o/--output" in err


def test_verbose_logs_to_stderr(dicom_dir, capsys):
    main(["-v", "scan", str(dicom_dir)])
    _, err = capsys.readouterr()
    assert "WARNING: Unable to decode" in err
    assert logging.WARNING == config.logger.level
