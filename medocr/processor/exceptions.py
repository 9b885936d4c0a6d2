from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from medocr.processor.models import ProcessedDocument


class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class AuditTrailSealedError(ProcessorError):
    """Raised when an event is recorded after the run has terminated."""


class ProcessingError(ProcessorError):
    """Single error type surfaced by the pipeline for any fatal failure.

    `cause` keeps the typed underlying error (JobFailedError, JobTimeoutError,
    BackendCallError, ...) so callers can tell failure kinds apart, and
    `document` holds the sealed FAILED document with its full history.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException,
        context: dict[str, Any],
        document: "ProcessedDocument | None" = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context
        self.document = document
