from dataclasses import dataclass

from medocr.backend.models import ExecutionMode, FeatureType, JobKind
from medocr.processor.models import ProcessingOptions
from medocr.storage.models import ObjectMetadata

DEFAULT_ASYNC_SIZE_THRESHOLD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class DocumentMetadata:
    """Size and page count used to pick an execution mode."""

    size_bytes: int = 0
    pages: int = 1

    @classmethod
    def from_object(cls, metadata: ObjectMetadata) -> "DocumentMetadata":
        return cls(size_bytes=metadata.size_bytes, pages=metadata.page_count_hint or 1)


def choose_execution_mode(
    metadata: DocumentMetadata,
    size_threshold_bytes: int = DEFAULT_ASYNC_SIZE_THRESHOLD_BYTES,
) -> ExecutionMode:
    """Multi-page or large documents go through an asynchronous job."""
    if metadata.pages > 1 or metadata.size_bytes > size_threshold_bytes:
        return ExecutionMode.ASYNC
    return ExecutionMode.SYNC


def requested_features(options: ProcessingOptions) -> tuple[FeatureType, ...]:
    """Analysis features for the options; empty means plain text detection."""
    features: list[FeatureType] = []
    if options.enable_forms:
        features.append(FeatureType.FORMS)
    if options.enable_tables:
        features.append(FeatureType.TABLES)
    if options.enable_queries and options.custom_queries:
        features.append(FeatureType.QUERIES)
    return tuple(features)


def job_kind_for(features: tuple[FeatureType, ...]) -> JobKind:
    return JobKind.DOCUMENT_ANALYSIS if features else JobKind.TEXT_DETECTION
