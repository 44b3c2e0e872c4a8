"""
PDF Service for FreightDesk.

Handles PDF generation using Playwright (system Chrome/Chromium) and
merging of generated PDFs into statement packs with pypdf.

IMPORTANT: Requires Chrome/Chromium to be installed on the system.
"""

import logging
from pathlib import Path
from typing import Optional, List, Callable

from playwright.sync_api import sync_playwright
from pypdf import PdfWriter, PdfReader

from domain.exceptions import ReportGenerationError
from services.chrome_checker import ensure_chrome_installed
from config.constants import DEFAULT_PDF_PAGE_SIZE

logger = logging.getLogger(__name__)


class PDFService:
    """
    Service for PDF generation using Playwright.

    Uses system Chrome/Chromium for HTML to PDF conversion.
    """

    def __init__(self, page_size: str = DEFAULT_PDF_PAGE_SIZE):
        """
        Initialize PDF service.

        Args:
            page_size: PDF page size (default: A4)

        Raises:
            EnvironmentError: If Chrome/Chromium is not found
        """
        ensure_chrome_installed()
        self.page_size = page_size

    def html_to_pdf(
        self,
        html_content: str,
        output_path: Path,
        page_size: Optional[str] = None,
        print_background: bool = True,
        margin: Optional[dict] = None,
        landscape: bool = False,
    ) -> Path:
        """
        Convert HTML to PDF using Playwright.

        Args:
            html_content: HTML content as string
            output_path: Output PDF file path
            page_size: PDF page size (default: service page size)
            print_background: Include background graphics
            margin: Page margins dict (e.g., {"top": "1cm", "bottom": "1cm"})
            landscape: Landscape orientation (wide report tables)

        Returns:
            Path to generated PDF file

        Raises:
            ReportGenerationError: If PDF generation fails

        Example:
            >>> service = PDFService()
            >>> pdf_path = service.html_to_pdf("<h1>Invoice</h1>", Path('./invoice.pdf'))
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if margin is None:
            margin = {
                "top": "1.2cm",
                "right": "1cm",
                "bottom": "1.5cm",
                "left": "1cm",
            }

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(channel='chrome')
                page = browser.new_page()
                page.set_content(html_content, wait_until='networkidle')
                page.pdf(
                    path=str(output_path),
                    format=page_size or self.page_size,
                    print_background=print_background,
                    margin=margin,
                    landscape=landscape,
                )
                browser.close()

            logger.info(f"Generated PDF: {output_path}")
            return output_path

        except Exception as e:
            logger.exception(f"Failed to generate PDF: {e}")
            raise ReportGenerationError(
                f"PDF generation failed: {e}",
                details={"output_path": str(output_path), "error": str(e)}
            )

    def merge_pdfs(
        self,
        pdf_files: List[Path],
        output_path: Path,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> Path:
        """
        Merge multiple PDF files into one (e.g. every open invoice of a customer).

        Args:
            pdf_files: List of PDF file paths to merge, in order
            output_path: Output merged PDF path
            progress_callback: Optional callback for progress (0-100)

        Returns:
            Path to merged PDF

        Raises:
            ReportGenerationError: If no files given, a file is missing, or merging fails
        """
        if not pdf_files:
            raise ReportGenerationError(
                "No PDF files to merge",
                details={"pdf_files": []}
            )

        for pdf_file in pdf_files:
            self.validate_pdf(pdf_file)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            writer = PdfWriter()
            total_files = len(pdf_files)

            for index, pdf_file in enumerate(pdf_files):
                reader = PdfReader(str(pdf_file))
                for page in reader.pages:
                    writer.add_page(page)

                if progress_callback:
                    progress_callback(int(((index + 1) / total_files) * 100))

                logger.debug(f"Merged {Path(pdf_file).name} ({len(reader.pages)} pages)")

            with open(output_path, 'wb') as output_file:
                writer.write(output_file)

            logger.info(f"Merged {total_files} PDFs to: {output_path}")
            return output_path

        except Exception as e:
            logger.exception(f"Failed to merge PDFs: {e}")
            raise ReportGenerationError(
                f"PDF merge failed: {e}",
                details={
                    "pdf_files": [str(f) for f in pdf_files],
                    "output_path": str(output_path),
                    "error": str(e)
                }
            )

    def validate_pdf(self, pdf_path: Path) -> bool:
        """
        Validate that file is a valid PDF (header check).

        Raises:
            ReportGenerationError: If missing or not a PDF
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise ReportGenerationError(
                f"PDF file does not exist: {pdf_path}",
                details={"pdf_path": str(pdf_path)}
            )

        with open(pdf_path, 'rb') as f:
            header = f.read(5)
            if header != b'%PDF-':
                raise ReportGenerationError(
                    f"Not a valid PDF file: {pdf_path}",
                    details={"pdf_path": str(pdf_path), "header": header}
                )

        return True


def create_pdf_service(page_size: str = DEFAULT_PDF_PAGE_SIZE) -> PDFService:
    """
    Factory function to create PDFService.

    Example:
        >>> service = create_pdf_service(page_size='A4')
    """
    return PDFService(page_size=page_size)
