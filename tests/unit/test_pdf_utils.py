"""
Unit tests for PDF footer stamping and merging.

PDFs are drawn with reportlab so no browser is needed.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from pypdf import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from domain.exceptions import ReportGenerationError
from services.pdf_service import PDFService
from services.pdf_utils import add_page_footer, count_pdf_pages


def _make_pdf(path: Path, pages: int = 1) -> Path:
    can = canvas.Canvas(str(path), pagesize=A4)
    for number in range(pages):
        can.drawString(72, 720, f"Body page {number + 1}")
        can.showPage()
    can.save()
    return path


@pytest.fixture
def pdf_service():
    with patch("services.pdf_service.ensure_chrome_installed"):
        return PDFService()


def test_count_pdf_pages(tmp_path):
    assert count_pdf_pages(_make_pdf(tmp_path / "a.pdf", pages=3)) == 3
    assert count_pdf_pages(tmp_path / "missing.pdf") == 0


def test_add_page_footer(tmp_path):
    pdf = _make_pdf(tmp_path / "invoice.pdf", pages=2)

    assert add_page_footer(pdf, label="INV-2024-0001") is True

    text = PdfReader(str(pdf)).pages[1].extract_text()
    assert "Page 2/2" in text
    assert "INV-2024-0001" in text


def test_add_page_footer_skip_first_page(tmp_path):
    pdf = _make_pdf(tmp_path / "pack.pdf", pages=2)

    add_page_footer(pdf, skip_first_page=True)

    reader = PdfReader(str(pdf))
    assert "Page 1/2" not in reader.pages[0].extract_text()
    assert "Page 2/2" in reader.pages[1].extract_text()


def test_add_page_footer_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        add_page_footer(tmp_path / "missing.pdf")


def test_merge_pdfs(pdf_service, tmp_path):
    parts = [_make_pdf(tmp_path / "1.pdf", pages=1), _make_pdf(tmp_path / "2.pdf", pages=2)]
    progress = []

    merged = pdf_service.merge_pdfs(parts, tmp_path / "out" / "merged.pdf", progress_callback=progress.append)

    assert count_pdf_pages(merged) == 3
    assert progress == [50, 100]


def test_merge_pdfs_rejects_empty_and_invalid(pdf_service, tmp_path):
    with pytest.raises(ReportGenerationError):
        pdf_service.merge_pdfs([], tmp_path / "merged.pdf")

    not_pdf = tmp_path / "notes.pdf"
    not_pdf.write_text("plain text")
    with pytest.raises(ReportGenerationError) as exc_info:
        pdf_service.merge_pdfs([not_pdf], tmp_path / "merged.pdf")
    assert "Not a valid PDF" in exc_info.value.message


def test_pdf_service_requires_chrome():
    with patch("services.pdf_service.ensure_chrome_installed", side_effect=EnvironmentError("no chrome")):
        with pytest.raises(EnvironmentError):
            PDFService()
