from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar

from medocr.backend.models import AnalysisResult, FeatureType, JobKind, JobPage


class BaseOcrBackend(ABC):
    """Contract for OCR backend adapters.

    Adapters return raw wire blocks and declare the scale their confidences
    are reported on; normalization happens in the pipeline.
    """

    confidence_scale: ClassVar[float] = 100.0

    @abstractmethod
    async def detect_text(self, document_ref: str) -> AnalysisResult:
        """Run plain text detection synchronously.

        Raises:
            BackendCallError: on any transport or API failure.
        """

    @abstractmethod
    async def analyze_document(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> AnalysisResult:
        """Run document analysis (forms, tables, queries) synchronously."""

    @abstractmethod
    async def start_detection(self, document_ref: str) -> str:
        """Start an asynchronous text detection job and return its id."""

    @abstractmethod
    async def start_analysis(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> str:
        """Start an asynchronous document analysis job and return its id."""

    @abstractmethod
    async def get_job(
        self,
        job_id: str,
        kind: JobKind,
        continuation_token: str | None = None,
    ) -> JobPage:
        """Fetch the status of a job and, once finished, one page of its blocks."""
