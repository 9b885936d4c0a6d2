from dataclasses import asdict

from medocr.blocks.exceptions import MalformedBlockError
from medocr.blocks.index import BlockIndex
from medocr.blocks.normalizer import normalize_blocks
from medocr.extraction.forms import extract_forms
from medocr.extraction.queries import extract_query_answers
from medocr.extraction.tables import extract_tables
from medocr.extraction.text import extract_text
from medocr.logging.logger import Log
from medocr.processor.models import ProcessingEventType, ProcessingStatus, utc_now
from medocr.processor.pipeline import PipelineContext, PipelineStep
from medocr.quality.assessor import QualityWeights, count_pages, overall_confidence, quality_score
from medocr.quality.review_gate import requires_human_review
from medocr.storage.base import BaseStorageClient
from medocr.storage.exceptions import MetadataLookupError
from medocr.worker.job_runner import JobRunner
from medocr.worker.strategy import DocumentMetadata, choose_execution_mode

_MAX_REJECTION_DETAILS = 20


class StartProcessingStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.status = ProcessingStatus.PROCESSING
        context.started_at = utc_now()
        context.trail.record(
            ProcessingEventType.PROCESSING_STARTED,
            {"document_ref": context.document_ref, "options": asdict(context.options)},
        )
        Log.info(f"Processing {context.document_ref}", run_id=context.run_id)
        return context


class ResolveMetadataStep(PipelineStep):
    """Looks up size and page count; falls back to 0 bytes / 1 page on failure."""

    def __init__(self, storage: BaseStorageClient) -> None:
        self._storage = storage

    async def run(self, context: PipelineContext) -> PipelineContext:
        try:
            metadata = DocumentMetadata.from_object(
                await self._storage.head_object(context.document_ref)
            )
        except MetadataLookupError as exc:
            metadata = DocumentMetadata()
            context.trail.record(
                ProcessingEventType.METADATA_FALLBACK,
                {"error": str(exc), "size_bytes": metadata.size_bytes, "pages": metadata.pages},
                level="warning",
            )
            Log.warning(
                f"Could not get metadata for {context.document_ref}, assuming defaults: {exc}",
                run_id=context.run_id,
            )
        context.metadata = metadata
        return context


class RunOcrStep(PipelineStep):
    def __init__(self, job_runner: JobRunner, async_size_threshold_bytes: int) -> None:
        self._job_runner = job_runner
        self._async_size_threshold_bytes = async_size_threshold_bytes

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before OCR")
        mode = choose_execution_mode(context.metadata, self._async_size_threshold_bytes)
        context.ocr_result = await self._job_runner.run(context.document_ref, context.options, mode)
        Log.info(
            f"OCR returned {len(context.ocr_result.raw_blocks)} raw blocks "
            f"for {context.document_ref}",
            run_id=context.run_id,
            mode=mode.value,
        )
        return context


class NormalizeBlocksStep(PipelineStep):
    """Drops malformed blocks with a warning; fails when none survive."""

    def __init__(self, confidence_scale: float) -> None:
        self._confidence_scale = confidence_scale

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.ocr_result is None:
            raise ValueError("PipelineContext.ocr_result must be set before normalization")
        raw_blocks = context.ocr_result.raw_blocks
        blocks, rejected = normalize_blocks(raw_blocks, self._confidence_scale)
        if rejected:
            context.trail.record(
                ProcessingEventType.MALFORMED_BLOCKS_DROPPED,
                {"dropped": len(rejected), "reasons": rejected[:_MAX_REJECTION_DETAILS]},
                level="warning",
            )
            Log.warning(
                f"Dropped {len(rejected)} malformed blocks for {context.document_ref}",
                run_id=context.run_id,
            )
        if raw_blocks and not blocks:
            raise MalformedBlockError(
                f"None of the {len(raw_blocks)} raw blocks could be normalized"
            )
        context.blocks = blocks
        return context


class ReconstructStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        options = context.options
        index = BlockIndex(context.blocks)
        context.text = extract_text(context.blocks)
        context.forms = extract_forms(context.blocks, index) if options.enable_forms else []
        context.tables = extract_tables(context.blocks, index) if options.enable_tables else []
        context.queries = (
            extract_query_answers(context.blocks, index) if options.enable_queries else []
        )
        return context


class AssessQualityStep(PipelineStep):
    def __init__(self, weights: QualityWeights) -> None:
        self._weights = weights

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.overall_confidence = overall_confidence(context.blocks)
        context.quality_score = quality_score(context.blocks, self._weights)
        context.pages = count_pages(context.blocks) or (
            context.metadata.pages if context.metadata else 1
        )
        return context


class ReviewGateStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.requires_human_review = requires_human_review(
            context.overall_confidence, context.quality_score, context.options
        )
        context.status = (
            ProcessingStatus.HUMAN_REVIEW
            if context.requires_human_review
            else ProcessingStatus.EXTRACTED
        )
        context.trail.record(
            ProcessingEventType.OCR_COMPLETED,
            {
                "status": context.status.value,
                "confidence": context.overall_confidence,
                "quality_score": context.quality_score,
                "requires_human_review": context.requires_human_review,
                "blocks_extracted": len(context.blocks),
                "forms_extracted": len(context.forms),
                "tables_extracted": len(context.tables),
                "queries_answered": len(context.queries),
            },
        )
        Log.info(
            f"Finished {context.document_ref} as {context.status.value}",
            run_id=context.run_id,
            confidence=round(context.overall_confidence, 3),
            quality_score=round(context.quality_score, 3),
        )
        return context


class MarkFailedStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        error = context.error
        details: dict[str, object] = {
            "error": str(error),
            "error_type": type(error).__name__,
        }
        job_id = getattr(error, "job_id", None)
        if job_id is not None:
            details["job_id"] = job_id
        context.status = ProcessingStatus.FAILED
        context.trail.record(ProcessingEventType.PROCESSING_FAILED, details, level="error")
        Log.error(
            f"Processing failed for {context.document_ref}: {error}",
            run_id=context.run_id,
        )
        return context
