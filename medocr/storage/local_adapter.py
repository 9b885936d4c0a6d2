import asyncio
from pathlib import Path

from medocr.logging.logger import Log
from medocr.pdf.base import BasePdfPageCounter
from medocr.pdf.exceptions import PdfInspectionError
from medocr.storage.base import BaseStorageClient
from medocr.storage.exceptions import MetadataLookupError
from medocr.storage.models import ObjectMetadata


class LocalStorageAdapter(BaseStorageClient):
    """Resolves document refs under a local root and reads their metadata.

    PDF page counts come from the configured page counter; other files get no
    page count hint.
    """

    def __init__(self, files_root: Path, page_counter: BasePdfPageCounter) -> None:
        self._files_root = files_root.resolve()
        self._page_counter = page_counter

    async def head_object(self, document_ref: str) -> ObjectMetadata:
        return await asyncio.to_thread(self._head, document_ref)

    def _head(self, document_ref: str) -> ObjectMetadata:
        path = self._resolve_path(document_ref)
        if not path.is_file():
            raise MetadataLookupError(f"File not found: {path}")
        size_bytes = path.stat().st_size
        if path.suffix.lower() != ".pdf":
            return ObjectMetadata(size_bytes=size_bytes)
        try:
            pages = self._page_counter.count_pages(path.read_bytes())
        except (OSError, PdfInspectionError) as exc:
            Log.warning(f"Could not count pages of {document_ref}: {exc}")
            pages = None
        return ObjectMetadata(
            size_bytes=size_bytes,
            page_count_hint=pages,
            content_type="application/pdf",
        )

    def _resolve_path(self, document_ref: str) -> Path:
        path = (self._files_root / document_ref).resolve()
        if not path.is_relative_to(self._files_root):
            raise MetadataLookupError(f"Document ref escapes storage root: {document_ref}")
        return path
