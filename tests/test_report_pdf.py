"""
Tests for HTML rendering and PDF encoding of the report document.
"""
import re

import pytest

from prodialer_backend.services import report_pdf
from prodialer_backend.services.report_document import build_report_document
from prodialer_backend.services.report_export import PdfRenderingUnavailable, ReportExportError
from prodialer_backend.services.report_service import build_report

from tests.conftest import NOW, call, make_contact


class FakeHTML:
    """Stands in for weasyprint.HTML."""

    rendered = []

    def __init__(self, string, base_url=None):
        self.string = string

    def write_pdf(self):
        FakeHTML.rendered.append(self.string)
        return b"%PDF-1.7 fake"


class BrokenHTML(FakeHTML):
    def write_pdf(self):
        raise ValueError("cairo exploded")


@pytest.fixture
def snapshot():
    contacts = [
        make_contact(name="<script>Eve</script>", status="Interested", calls=[call(days_ago=1)]),
    ]
    return build_report(contacts, "7d", NOW)


def test_html_positions_every_page_and_escapes_text(snapshot):
    document = build_report_document(snapshot, "7d", "ProDialer")

    html = report_pdf.render_document_html(document)

    assert html.count('class="page"') == len(document.pages)
    assert "ProDialer Analytics Report" in html
    assert "Report Period: Last 7d" in html
    assert "&lt;script&gt;Eve&lt;/script&gt;" in html
    assert "<script>" not in html
    assert "210.00mm" in html


def test_export_report_pdf_uses_weasyprint(monkeypatch, snapshot):
    FakeHTML.rendered = []
    monkeypatch.setattr(report_pdf, "_load_html_class", lambda: FakeHTML)

    pdf = report_pdf.export_report_pdf(snapshot, "7d", "ProDialer")

    assert pdf == b"%PDF-1.7 fake"
    assert "Recent Call Activity" in FakeHTML.rendered[0]


def test_missing_weasyprint_is_an_export_error(monkeypatch):
    def _missing():
        raise ImportError("No module named 'weasyprint'")

    monkeypatch.setattr(report_pdf, "_load_html_class", _missing)

    with pytest.raises(PdfRenderingUnavailable):
        report_pdf.generate_pdf_from_html("<html></html>")


def test_rendering_failure_is_an_export_error(monkeypatch):
    monkeypatch.setattr(report_pdf, "_load_html_class", lambda: BrokenHTML)

    with pytest.raises(ReportExportError, match="cairo exploded"):
        report_pdf.generate_pdf_from_html("<html></html>", title="x")


def test_table_cells_keep_the_layout_line_breaks():
    contact = make_contact(name="Maximilian Alexander Featherstonehaugh Worthington", calls=[call(days_ago=1)])
    document = build_report_document(build_report([contact], "7d", NOW), "7d", "ProDialer")
    table = next(block for page in document.pages for block in page.blocks if block.kind == "table")
    name_lines = table.rows[1].cells[0]

    html = report_pdf.render_document_html(document)

    assert len(name_lines) > 1
    assert "<td>" + "<br>".join(name_lines) + "</td>" in html
    assert re.search(r"table\.block td \{[^}]*white-space: pre;", html)
    assert "white-space: normal" not in html
