class StorageError(Exception):
    """Base exception for object storage failures."""


class MetadataLookupError(StorageError):
    """Raised when object metadata cannot be read."""
