import asyncio
from collections.abc import Sequence
from uuid import uuid4

from medocr.backend.base import BaseOcrBackend
from medocr.backend.exceptions import JobCancelledError
from medocr.backend.factory import OcrBackendFactory
from medocr.config.settings import Settings
from medocr.logging.logger import Log
from medocr.processor.exceptions import ProcessingError
from medocr.processor.models import ProcessedDocument, ProcessingOptions
from medocr.processor.pipeline import PipelineContext, PipelineStep
from medocr.processor.steps import (
    AssessQualityStep,
    MarkFailedStep,
    NormalizeBlocksStep,
    ReconstructStep,
    ResolveMetadataStep,
    ReviewGateStep,
    RunOcrStep,
    StartProcessingStep,
)
from medocr.quality.assessor import QualityWeights
from medocr.storage.base import BaseStorageClient
from medocr.storage.factory import StorageClientFactory
from medocr.worker.job_runner import JobRunner
from medocr.worker.poller import JobPoller


class DocumentProcessor:
    """Runs the OCR extraction pipeline for one document at a time.

    Pipeline: start -> metadata -> OCR -> normalize -> reconstruct -> quality
    -> review gate. Any failure runs the failed step and surfaces a single
    ProcessingError. Cancelling the run in any step is a failure too, with a
    JobCancelledError cause. Runs share no mutable state, so one processor can
    serve many concurrent documents.
    """

    def __init__(self, steps: Sequence[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step

    async def process_document(
        self,
        document_ref: str,
        options: ProcessingOptions | None = None,
    ) -> ProcessedDocument:
        context = PipelineContext(
            run_id=str(uuid4()),
            document_ref=document_ref,
            options=options or ProcessingOptions(),
        )
        try:
            for step in self._steps:
                context = await step.run(context)
        except asyncio.CancelledError as exc:
            Log.warning(f"Run for {document_ref} was cancelled", run_id=context.run_id)
            cancelled = JobCancelledError()
            cancelled.__cause__ = exc
            raise await self._fail(context, cancelled) from cancelled
        except Exception as exc:
            raise await self._fail(context, exc) from exc
        return context.to_document()

    async def _fail(self, context: PipelineContext, exc: Exception) -> ProcessingError:
        context.error = exc
        context = await self._failed_step.run(context)
        return ProcessingError(
            f"Failed to process document {context.document_ref}: {exc}",
            cause=exc,
            context={"run_id": context.run_id, "document_ref": context.document_ref},
            document=context.to_document(),
        )


def build_processor(
    settings: Settings,
    backend: BaseOcrBackend | None = None,
    storage: BaseStorageClient | None = None,
) -> DocumentProcessor:
    """Build a DocumentProcessor with the configured or supplied adapters."""
    backend = backend or OcrBackendFactory.create(settings)
    storage = storage or StorageClientFactory.create(settings)
    poller = JobPoller(
        backend,
        poll_interval_seconds=settings.job_poll_interval_seconds,
        timeout_seconds=settings.job_timeout_seconds,
    )
    job_runner = JobRunner(backend, poller)
    Log.debug(
        f"Built processor with {type(backend).__name__} and {type(storage).__name__}"
    )
    return DocumentProcessor(
        steps=[
            StartProcessingStep(),
            ResolveMetadataStep(storage),
            RunOcrStep(job_runner, settings.async_size_threshold_bytes),
            NormalizeBlocksStep(backend.confidence_scale),
            ReconstructStep(),
            AssessQualityStep(
                QualityWeights(
                    confidence=settings.quality_confidence_weight,
                    coverage=settings.quality_coverage_weight,
                )
            ),
            ReviewGateStep(),
        ],
        failed_step=MarkFailedStep(),
    )
