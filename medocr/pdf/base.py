from abc import ABC, abstractmethod


class BasePdfPageCounter(ABC):
    """Contract for PDF page counting adapters."""

    @abstractmethod
    def count_pages(self, pdf_bytes: bytes) -> int:
        """Return the number of pages in a PDF.

        Raises:
            PdfInspectionError: if the bytes cannot be opened as a PDF.
        """
