from abc import ABC, abstractmethod

from medocr.storage.models import ObjectMetadata


class BaseStorageClient(ABC):
    """Contract for object storage adapters."""

    @abstractmethod
    async def head_object(self, document_ref: str) -> ObjectMetadata:
        """Return size and, when known, page count of a stored document.

        Raises:
            MetadataLookupError: on any failure, including a missing object.
        """
