from medocr.config.settings import Settings
from medocr.pdf.base import BasePdfPageCounter
from medocr.pdf.pdfplumber_adapter import PdfPlumberPageCounter
from medocr.pdf.pymupdf_adapter import PyMuPdfPageCounter


class PdfPageCounterFactory:
    """Creates the PDF page counter selected by `pdf_engine`."""

    ADAPTERS: dict[str, type[BasePdfPageCounter]] = {
        "pdfplumber": PdfPlumberPageCounter,
        "pymupdf": PyMuPdfPageCounter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfPageCounter:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
