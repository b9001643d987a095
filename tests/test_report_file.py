"""Tests for report file handling."""

from datetime import datetime

import pytest

from dbcompare_errors import OutputFileError
from report_file import ReportFile, append_to_report, default_mismatch_path


def test_default_path_uses_timestamp():
    assert default_mismatch_path(datetime(2024, 3, 5, 7, 8, 9)) == "dbcompare_mismatches_20240305_070809.txt"


def test_write_truncates(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old\n", encoding="utf-8")
    with ReportFile(str(path)) as report:
        report.write("new\n")
    assert path.read_text(encoding="utf-8") == "new\n"


def test_append_keeps_previous_output(tmp_path):
    path = tmp_path / "out.txt"
    append_to_report(str(path), "first\n")
    append_to_report(str(path), "second\n")
    assert path.read_text(encoding="utf-8") == "first\nsecond\n"


def test_append_without_path_is_a_no_op(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    append_to_report(None, "ignored\n")
    assert list(tmp_path.iterdir()) == []


def test_open_failure_raises_output_file_error(tmp_path):
    with pytest.raises(OutputFileError, match="Failed to open output file"):
        with ReportFile(str(tmp_path / "no" / "such" / "dir.txt")):
            pass


def test_file_closed_after_error_inside_block(tmp_path):
    report = ReportFile(str(tmp_path / "out.txt"))
    with pytest.raises(RuntimeError):
        with report:
            report.write("partial\n")
            raise RuntimeError("boom")
    assert report._handle is None
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "partial\n"
