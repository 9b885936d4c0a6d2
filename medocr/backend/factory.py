from pathlib import Path

from medocr.backend.base import BaseOcrBackend
from medocr.backend.example_adapter import ExampleBackendAdapter
from medocr.backend.textract_adapter import TextractBackendAdapter
from medocr.config.settings import Settings


class OcrBackendFactory:
    """Creates the configured OCR backend adapter."""

    BACKENDS = ("textract", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrBackend:
        backend = settings.ocr_backend.lower()
        if backend == "example":
            fixture = settings.example_fixture_path.strip()
            return ExampleBackendAdapter(fixture_path=Path(fixture) if fixture else None)
        if backend == "textract":
            if not settings.s3_bucket_name:
                raise ValueError("s3_bucket_name is required for ocr_backend=textract")
            return TextractBackendAdapter(
                bucket_name=settings.s3_bucket_name,
                region=settings.aws_region,
                access_key_id=settings.aws_access_key_id,
                secret_access_key=settings.aws_secret_access_key,
                output_prefix=settings.textract_output_prefix,
            )
        raise ValueError(f"Unknown OCR backend '{backend}'. Choose from: {list(cls.BACKENDS)}")
