class OcrBackendError(Exception):
    """Base exception for OCR backend failures."""


class BackendCallError(OcrBackendError):
    """Raised when a call to the OCR backend fails at the transport or API level."""


class JobFailedError(OcrBackendError):
    """Raised when the backend reports that an asynchronous job failed."""

    def __init__(self, job_id: str, status_message: str | None) -> None:
        super().__init__(f"OCR job {job_id} failed: {status_message or 'no status message'}")
        self.job_id = job_id
        self.status_message = status_message


class JobTimeoutError(OcrBackendError):
    """Raised when polling exceeds the configured budget."""

    def __init__(self, job_id: str, elapsed_seconds: float) -> None:
        super().__init__(f"OCR job {job_id} timed out after {elapsed_seconds:.1f}s")
        self.job_id = job_id
        self.elapsed_seconds = elapsed_seconds


class JobCancelledError(OcrBackendError):
    """Raised when the task running or waiting on a job is cancelled.

    `job_id` is None when the run was cancelled before a job was polled.
    """

    def __init__(self, job_id: str | None = None) -> None:
        if job_id is None:
            message = "OCR run was cancelled before a job was polled"
        else:
            message = f"Polling for OCR job {job_id} was cancelled"
        super().__init__(message)
        self.job_id = job_id
