"""
PDF text extraction for the narration reader.

Opens documents from in-memory bytes with PyMuPDF and flattens every
page into a single line of plain text.
"""

import logging
from typing import Optional

import fitz  # PyMuPDF

from core.errors import CorruptDocument

logger = logging.getLogger(__name__)

CORRUPT_PDF_MESSAGE = "Could not parse the PDF file. It may be corrupt or encrypted."


class PdfTextReader:
    """Handles PDF document loading and text extraction for narration."""

    def __init__(self, data: bytes):
        """
        Open a PDF from raw bytes.

        Args:
            data: Complete PDF file contents.

        Raises:
            CorruptDocument: If the bytes are not a readable PDF, or the
                             document is password protected.
        """
        self.doc: Optional[fitz.Document] = None
        try:
            self.doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.debug("PyMuPDF rejected the stream: %s", e)
            raise CorruptDocument(CORRUPT_PDF_MESSAGE) from e

        if self.doc.needs_pass:
            self.close()
            raise CorruptDocument(CORRUPT_PDF_MESSAGE)

        self.total_pages: int = self.doc.page_count

    def extract_page_text(self, page_index: int) -> str:
        """
        Extract the text of one page with its lines joined by spaces.

        Args:
            page_index: 0-based index of the page

        Returns:
            Plain text content of the page (no trailing newline)
        """
        if not self.doc or page_index < 0 or page_index >= self.total_pages:
            return ""

        page = self.doc.load_page(page_index)
        return " ".join(page.get_text().splitlines())

    def extract_text(self) -> str:
        """Return the text of every page, one newline-terminated line per page."""
        try:
            return "".join(
                self.extract_page_text(idx) + "\n" for idx in range(self.total_pages)
            )
        except Exception as e:
            raise CorruptDocument(CORRUPT_PDF_MESSAGE) from e

    def close(self) -> None:
        """Close the underlying document."""
        if self.doc:
            self.doc.close()
            self.doc = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"PdfTextReader(pages={getattr(self, 'total_pages', 0)})"


def extract_pdf_text(data: bytes) -> str:
    """Decode PDF bytes to plain text."""
    with PdfTextReader(data) as reader:
        return reader.extract_text()
