from dataclasses import dataclass, field
from typing import Any

from medocr.backend.base import BaseOcrBackend
from medocr.backend.models import ExecutionMode, JobKind, JobStatus, JobStatusReport
from medocr.logging.logger import Log
from medocr.processor.models import ProcessingOptions
from medocr.worker.poller import JobPoller
from medocr.worker.strategy import job_kind_for, requested_features


@dataclass(frozen=True)
class OcrResult:
    """Raw blocks of one OCR run and how they were obtained."""

    raw_blocks: list[dict[str, Any]] = field(default_factory=list)
    mode: ExecutionMode = ExecutionMode.SYNC
    job_id: str | None = None
    warnings: list[str] = field(default_factory=list)


class JobRunner:
    """Send one document to the OCR backend, directly or as a polled job."""

    def __init__(self, backend: BaseOcrBackend, poller: JobPoller) -> None:
        self._backend = backend
        self._poller = poller

    async def run(
        self,
        document_ref: str,
        options: ProcessingOptions,
        mode: ExecutionMode,
    ) -> OcrResult:
        if mode is ExecutionMode.ASYNC:
            return await self._run_async(document_ref, options)
        return await self._run_sync(document_ref, options)

    async def get_job_status(self, job_id: str, kind: JobKind) -> JobStatusReport:
        """Current status of a job with a coarse progress estimate."""
        page = await self._backend.get_job(job_id, kind)
        return JobStatusReport(
            job_id=job_id,
            status=page.status,
            progress=estimate_progress(page.status),
        )

    async def _run_sync(self, document_ref: str, options: ProcessingOptions) -> OcrResult:
        features = requested_features(options)
        if features:
            Log.info(f"Analyzing {document_ref} synchronously", features=_names(features))
            result = await self._backend.analyze_document(
                document_ref, features, options.custom_queries
            )
        else:
            Log.info(f"Detecting text in {document_ref} synchronously")
            result = await self._backend.detect_text(document_ref)
        return OcrResult(raw_blocks=result.raw_blocks, mode=ExecutionMode.SYNC)

    async def _run_async(self, document_ref: str, options: ProcessingOptions) -> OcrResult:
        features = requested_features(options)
        kind = job_kind_for(features)
        if features:
            job_id = await self._backend.start_analysis(
                document_ref, features, options.custom_queries
            )
        else:
            job_id = await self._backend.start_detection(document_ref)
        Log.info(f"Started OCR job {job_id} for {document_ref}", kind=kind.value)
        outcome = await self._poller.wait(job_id, kind)
        return OcrResult(
            raw_blocks=outcome.raw_blocks,
            mode=ExecutionMode.ASYNC,
            job_id=job_id,
            warnings=outcome.warnings,
        )


def estimate_progress(status: JobStatus) -> int:
    """The backend reports no progress, so this is a rough percentage."""
    if status.is_success:
        return 100
    if status is JobStatus.IN_PROGRESS:
        return 50
    return 0


def _names(features: tuple[Any, ...]) -> str:
    return ",".join(feature.value for feature in features)
