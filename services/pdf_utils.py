"""
PDF Utilities for document footers.

Stamps generated invoices, statements and statement packs with a small
footer ("<document label>  Page X/Y") using reportlab overlays merged into
the pages with pypdf.
"""

import io
import logging
from pathlib import Path
from typing import Optional

from pypdf import PdfReader, PdfWriter
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

FOOTER_FONT = "Helvetica"
FOOTER_FONT_SIZE = 7
FOOTER_MARGIN = 14  # points from page edge


def create_footer_overlay(
    page_width: float,
    page_height: float,
    page_num: int,
    total_pages: int,
    label: Optional[str] = None,
) -> PdfReader:
    """
    Create transparent overlay with label bottom-left and page number bottom-right.

    Args:
        page_width: Page width in points
        page_height: Page height in points
        page_num: Current page number (1-based)
        total_pages: Total page count
        label: Optional document label (e.g. "INV-2024-0042")

    Returns:
        PdfReader with a single overlay page
    """
    packet = io.BytesIO()
    can = canvas.Canvas(packet, pagesize=(page_width, page_height))
    can.setFont(FOOTER_FONT, FOOTER_FONT_SIZE)
    can.setFillColorRGB(0.45, 0.45, 0.45)

    if label:
        can.drawString(FOOTER_MARGIN, FOOTER_MARGIN, label)

    page_text = f"Page {page_num}/{total_pages}"
    text_width = can.stringWidth(page_text, FOOTER_FONT, FOOTER_FONT_SIZE)
    can.drawString(page_width - text_width - FOOTER_MARGIN, FOOTER_MARGIN, page_text)

    can.save()
    packet.seek(0)
    return PdfReader(packet)


def add_page_footer(
    pdf_path: Path,
    label: Optional[str] = None,
    skip_first_page: bool = False,
) -> bool:
    """
    Add "Page X/Y" (and optional label) to every page of a PDF, in place.

    Args:
        pdf_path: PDF to stamp (overwritten)
        label: Optional text for the bottom-left corner
        skip_first_page: Leave page 1 (cover) unstamped

    Returns:
        True if stamping succeeded, False on read/write errors

    Raises:
        FileNotFoundError: If PDF does not exist
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        logger.error(f"PDF not found: {pdf_path}")
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    try:
        reader = PdfReader(str(pdf_path))
        writer = PdfWriter()
        total_pages = len(reader.pages)

        for page_num, page in enumerate(reader.pages, 1):
            if skip_first_page and page_num == 1:
                writer.add_page(page)
                continue

            overlay = create_footer_overlay(
                page_width=float(page.mediabox.width),
                page_height=float(page.mediabox.height),
                page_num=page_num,
                total_pages=total_pages,
                label=label,
            )
            page.merge_page(overlay.pages[0])
            writer.add_page(page)

        with open(pdf_path, 'wb') as output:
            writer.write(output)

        logger.info(f"Footer added to {total_pages} pages in {pdf_path.name}")
        return True

    except PermissionError:
        logger.error(f"Access denied to PDF: {pdf_path}")
        return False
    except Exception as e:
        logger.error(f"Error stamping PDF {pdf_path}: {e}", exc_info=True)
        return False


def count_pdf_pages(pdf_path: Path) -> int:
    """
    Count pages in a PDF file.

    Returns:
        Number of pages, 0 if the file cannot be read
    """
    try:
        reader = PdfReader(str(pdf_path))
        return len(reader.pages)
    except Exception as e:
        logger.warning(f"Could not count pages in {pdf_path}: {e}")
        return 0
