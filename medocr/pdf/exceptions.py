class PdfInspectionError(Exception):
    """Raised when a PDF cannot be opened for inspection."""
