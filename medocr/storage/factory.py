from pathlib import Path

from medocr.config.settings import Settings
from medocr.pdf.factory import PdfPageCounterFactory
from medocr.storage.base import BaseStorageClient
from medocr.storage.local_adapter import LocalStorageAdapter
from medocr.storage.s3_adapter import S3StorageAdapter


class StorageClientFactory:
    """Creates the configured storage adapter."""

    BACKENDS = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorageClient:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalStorageAdapter(
                files_root=Path(settings.local_files_root),
                page_counter=PdfPageCounterFactory.create(settings),
            )
        if backend == "s3":
            if not settings.s3_bucket_name:
                raise ValueError("s3_bucket_name is required for storage_backend=s3")
            return S3StorageAdapter(
                bucket_name=settings.s3_bucket_name,
                region=settings.aws_region,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
            )
        raise ValueError(f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}")
