from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from medocr.backend.models import ExecutionMode
from medocr.blocks.models import Block
from medocr.extraction.models import FormField, QueryAnswer, Table
from medocr.processor.exceptions import AuditTrailSealedError


class ProcessingStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    EXTRACTED = "EXTRACTED"
    HUMAN_REVIEW = "HUMAN_REVIEW"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (
            ProcessingStatus.EXTRACTED,
            ProcessingStatus.HUMAN_REVIEW,
            ProcessingStatus.FAILED,
        )


class ProcessingEventType(str, Enum):
    PROCESSING_STARTED = "PROCESSING_STARTED"
    METADATA_FALLBACK = "METADATA_FALLBACK"
    MALFORMED_BLOCKS_DROPPED = "MALFORMED_BLOCKS_DROPPED"
    OCR_COMPLETED = "OCR_COMPLETED"
    PROCESSING_FAILED = "PROCESSING_FAILED"


@dataclass(frozen=True)
class ProcessingOptions:
    """Caller-supplied switches for one run. Threshold is on the [0, 1] scale."""

    enable_forms: bool = False
    enable_tables: bool = False
    enable_queries: bool = False
    custom_queries: tuple[str, ...] = ()
    confidence_threshold: float = 0.8
    require_human_review: bool = False
    include_blocks: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence_threshold must be within [0, 1], got {self.confidence_threshold}"
            )
        object.__setattr__(self, "custom_queries", tuple(self.custom_queries))


@dataclass(frozen=True)
class ProcessingEvent:
    timestamp: datetime
    event: ProcessingEventType
    details: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    level: str = "info"


class AuditTrail:
    """Append-only list of processing events, sealed when the run ends."""

    def __init__(self) -> None:
        self._events: list[ProcessingEvent] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._events)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def record(
        self,
        event: ProcessingEventType,
        details: dict[str, Any] | None = None,
        level: str = "info",
    ) -> ProcessingEvent:
        if self._sealed:
            raise AuditTrailSealedError(f"Cannot record {event.value}: audit trail is sealed")
        entry = ProcessingEvent(
            timestamp=utc_now(),
            event=event,
            details=_freeze(details or {}),
            level=level,
        )
        self._events.append(entry)
        return entry

    def seal(self) -> tuple[ProcessingEvent, ...]:
        self._sealed = True
        return tuple(self._events)

    def events(self) -> tuple[ProcessingEvent, ...]:
        return tuple(self._events)


@dataclass(frozen=True)
class ProcessedDocument:
    """Output of one pipeline run, owned by the caller."""

    id: str
    document_ref: str
    original_file_name: str
    status: ProcessingStatus
    pages: int = 0
    text: str = ""
    blocks: list[Block] = field(default_factory=list)
    forms: list[FormField] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)
    queries: list[QueryAnswer] = field(default_factory=list)
    overall_confidence: float = 0.0
    quality_score: float = 0.0
    requires_human_review: bool = False
    execution_mode: ExecutionMode | None = None
    job_id: str | None = None
    warnings: list[str] = field(default_factory=list)
    processing_started_at: datetime | None = None
    processing_finished_at: datetime | None = None
    history: tuple[ProcessingEvent, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation for downstream consumers."""
        return _jsonable(self)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _jsonable(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value
