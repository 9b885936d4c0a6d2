from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from medocr.blocks.models import Block
from medocr.extraction.models import FormField, QueryAnswer, Table
from medocr.processor.models import (
    AuditTrail,
    ProcessedDocument,
    ProcessingOptions,
    ProcessingStatus,
    utc_now,
)
from medocr.worker.job_runner import OcrResult
from medocr.worker.strategy import DocumentMetadata


@dataclass(slots=True)
class PipelineContext:
    """Mutable state of one run; frozen into a ProcessedDocument at the end."""

    run_id: str
    document_ref: str
    options: ProcessingOptions
    trail: AuditTrail = field(default_factory=AuditTrail)
    status: ProcessingStatus = ProcessingStatus.PENDING
    started_at: datetime | None = None
    metadata: DocumentMetadata | None = None
    ocr_result: OcrResult | None = None
    blocks: list[Block] = field(default_factory=list)
    text: str = ""
    forms: list[FormField] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)
    queries: list[QueryAnswer] = field(default_factory=list)
    pages: int = 0
    overall_confidence: float = 0.0
    quality_score: float = 0.0
    requires_human_review: bool = False
    error: Exception | None = None

    @property
    def original_file_name(self) -> str:
        return self.document_ref.rstrip("/").split("/")[-1] or self.document_ref

    def to_document(self) -> ProcessedDocument:
        """Seal the audit trail and freeze the run into its output document."""
        if not self.status.is_terminal:
            raise ValueError(f"Run {self.run_id} is still {self.status.value}")
        history = self.trail.seal()
        ocr_result = self.ocr_result
        return ProcessedDocument(
            id=self.run_id,
            document_ref=self.document_ref,
            original_file_name=self.original_file_name,
            status=self.status,
            pages=self.pages,
            text=self.text,
            blocks=list(self.blocks) if self.options.include_blocks else [],
            forms=list(self.forms),
            tables=list(self.tables),
            queries=list(self.queries),
            overall_confidence=self.overall_confidence,
            quality_score=self.quality_score,
            requires_human_review=self.requires_human_review,
            execution_mode=ocr_result.mode if ocr_result else None,
            job_id=ocr_result.job_id if ocr_result else None,
            warnings=list(ocr_result.warnings) if ocr_result else [],
            processing_started_at=self.started_at,
            processing_finished_at=utc_now(),
            history=history,
        )


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
