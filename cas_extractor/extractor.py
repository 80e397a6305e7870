"""
PDF text extraction module for the CAS extractor.

This module turns raw PDF bytes into page-ordered plain text using
pdfplumber. Decryption and decode failures are translated into the typed
errors of ``cas_extractor.exceptions``; nothing else in the package talks
to the PDF library.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect
from pdfplumber.utils.exceptions import PdfminerException

from cas_extractor.config import LAYOUT_FALLBACK_THRESHOLD
from cas_extractor.exceptions import UnreadableDocumentError, WrongPasswordError

logger = logging.getLogger(__name__)


@dataclass
class PageContent:
    """
    Represents extracted content from a single PDF page.

    Attributes:
        page_number: 1-indexed page number
        raw_text: Complete raw text of the page
    """
    page_number: int
    raw_text: str = ""


@dataclass
class ExtractedDocument:
    """
    Represents the complete extracted content from a PDF document.

    Attributes:
        pages: List of page contents in document order
        total_pages: Total number of pages in the document
    """
    pages: List[PageContent] = field(default_factory=list)
    total_pages: int = 0

    def get_all_text(self) -> str:
        """
        Get complete text from all pages.

        Returns:
            Text of every page joined by newlines, in page order.
        """
        return "\n".join(page.raw_text for page in self.pages)


def _is_password_error(error: BaseException) -> bool:
    """Walk the exception chain looking for a rejected password."""
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, PDFPasswordIncorrect):
            return True
        # PdfminerException wraps the underlying pdfminer error in args[0]
        if isinstance(current, PdfminerException) and current.args:
            wrapped = current.args[0]
            if isinstance(wrapped, PDFPasswordIncorrect):
                return True
            if isinstance(wrapped, BaseException):
                current = wrapped
                continue
        current = current.__cause__ or current.__context__
    return False


class PDFExtractor:
    """
    Extracts text content from CAS PDF bytes.

    Pages are read sequentially so the joined text keeps absolute document
    order, which section segmentation depends on.
    """

    def __init__(self, password: Optional[str] = None):
        """
        Initialize the PDF extractor.

        Args:
            password: Optional password for encrypted PDFs.
        """
        self.password = password

    def extract(self, data: bytes) -> ExtractedDocument:
        """
        Extract text content from PDF bytes.

        Args:
            data: Raw PDF file content.

        Returns:
            ExtractedDocument containing all extracted text.

        Raises:
            WrongPasswordError: If the document rejects the password.
            UnreadableDocumentError: If the bytes cannot be decoded as a PDF.
        """
        if not data:
            raise UnreadableDocumentError("PDF content is empty")

        logger.info(
            f"Extracting text from PDF ({len(data)} bytes, "
            f"password={'yes' if self.password else 'no'})"
        )

        document = ExtractedDocument()

        try:
            with pdfplumber.open(io.BytesIO(data), password=self.password or "") as pdf:
                document.total_pages = len(pdf.pages)
                logger.info(f"PDF has {document.total_pages} pages")

                for page_num, page in enumerate(pdf.pages, start=1):
                    page_content = self._extract_page(page, page_num)
                    document.pages.append(page_content)
                    logger.debug(
                        f"Page {page_num}: extracted {len(page_content.raw_text)} chars"
                    )

        except PDFPasswordIncorrect as e:
            logger.warning("PDF password was rejected")
            raise WrongPasswordError() from e
        except Exception as e:
            if _is_password_error(e):
                logger.warning("PDF password was rejected")
                raise WrongPasswordError() from e
            logger.error(f"Failed to extract PDF: {e}")
            raise UnreadableDocumentError(f"Failed to read PDF: {e}") from e

        return document

    def _extract_page(self, page, page_number: int) -> PageContent:
        """
        Extract text from a single PDF page.

        Args:
            page: pdfplumber page object.
            page_number: 1-indexed page number.

        Returns:
            PageContent with the page's raw text.
        """
        raw_text = page.extract_text(x_tolerance=2, y_tolerance=2) or ""

        # Layout-aware extraction recovers text from sparse, table-heavy pages
        if len(raw_text.strip()) < LAYOUT_FALLBACK_THRESHOLD:
            layout_text = page.extract_text(layout=True, x_tolerance=3, y_tolerance=3) or ""
            if len(layout_text.strip()) > len(raw_text.strip()):
                raw_text = layout_text

        if not raw_text.strip():
            logger.warning(f"No text extracted from page {page_number}")

        return PageContent(page_number=page_number, raw_text=raw_text)


def extract_text_from_bytes(data: bytes, password: Optional[str] = None) -> ExtractedDocument:
    """
    Convenience function to extract text from PDF bytes.

    Args:
        data: Raw PDF file content.
        password: Optional password for encrypted PDFs.

    Returns:
        ExtractedDocument containing all extracted text.
    """
    extractor = PDFExtractor(password=password)
    return extractor.extract(data)


def read_pdf_file(pdf_path: Union[str, Path]) -> bytes:
    """
    Read a PDF file from disk.

    Raises:
        FileNotFoundError: If the PDF file does not exist.
        ValueError: If the file is not a PDF.
    """
    pdf_path = Path(pdf_path)

    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    if not pdf_path.suffix.lower() == ".pdf":
        raise ValueError(f"File is not a PDF: {pdf_path}")

    return pdf_path.read_bytes()
