import io

import pdfplumber

from medocr.pdf.base import BasePdfPageCounter
from medocr.pdf.exceptions import PdfInspectionError


class PdfPlumberPageCounter(BasePdfPageCounter):
    """Counts PDF pages using pdfplumber."""

    def count_pages(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfInspectionError(f"pdfplumber could not open PDF: {exc}") from exc
