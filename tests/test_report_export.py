"""
Tests for export file naming, the file sink and the batch export job.
"""
import pytest

from prodialer_backend import report_export_job
from prodialer_backend.services import report_pdf
from prodialer_backend.services.report_export import (
    ExportWriteError,
    ReportExportError,
    export_filename,
    write_export,
)

from tests.conftest import NOW, call, make_contact


def test_filenames_are_deterministic():
    assert export_filename("prodialer", "report", "30d", "pdf") == "prodialer-report-30d.pdf"
    assert export_filename("prodialer", "leads", "7d", ".csv") == "prodialer-leads-7d.csv"


def test_write_export_creates_directory(tmp_path):
    target = tmp_path / "nested" / "dir"

    path = write_export(target, "a.csv", "Name\r\nÅsa\r\n")

    assert path == target / "a.csv"
    assert path.read_bytes() == "Name\r\nÅsa\r\n".encode("utf-8")


def test_write_failure_is_distinct_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(ExportWriteError) as excinfo:
        write_export(blocker, "report.pdf", b"%PDF")

    assert isinstance(excinfo.value, ReportExportError)


def test_job_writes_both_exports(tmp_path, monkeypatch):
    monkeypatch.setattr(report_pdf, "_load_html_class", lambda: _FakeHTML)
    contacts = [make_contact(name="Ada", calls=[call(days_ago=1)])]

    paths = report_export_job.export_reports(contacts, "30d", tmp_path, NOW, "both")

    assert [p.name for p in paths] == ["prodialer-leads-30d.csv", "prodialer-report-30d.pdf"]
    assert paths[0].read_text(encoding="utf-8").splitlines()[1].startswith("Ada,")
    assert paths[1].read_bytes() == b"%PDF-fake"


def test_job_csv_only_skips_pdf(tmp_path, monkeypatch):
    def _fail():
        raise AssertionError("PDF should not be rendered")

    monkeypatch.setattr(report_pdf, "_load_html_class", _fail)

    paths = report_export_job.export_reports([], "7d", tmp_path, NOW, "csv")

    assert [p.name for p in paths] == ["prodialer-leads-7d.csv"]


class _FakeHTML:
    def __init__(self, string, base_url=None):
        self.string = string

    def write_pdf(self):
        return b"%PDF-fake"
