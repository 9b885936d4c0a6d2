from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ExecutionMode(str, Enum):
    SYNC = "SYNC"
    ASYNC = "ASYNC"


class FeatureType(str, Enum):
    FORMS = "FORMS"
    TABLES = "TABLES"
    QUERIES = "QUERIES"


class JobKind(str, Enum):
    """Which family of job APIs a job id belongs to."""

    TEXT_DETECTION = "TEXT_DETECTION"
    DOCUMENT_ANALYSIS = "DOCUMENT_ANALYSIS"


class JobStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    PARTIAL_SUCCESS = "PARTIAL_SUCCESS"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.IN_PROGRESS

    @property
    def is_success(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.PARTIAL_SUCCESS)


@dataclass(frozen=True)
class AnalysisResult:
    """Raw blocks returned by a synchronous backend call."""

    raw_blocks: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class JobPage:
    """One response of a "get job" call; more pages follow while a token is set."""

    status: JobStatus
    raw_blocks: list[dict[str, Any]] = field(default_factory=list)
    continuation_token: str | None = None
    status_message: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class JobStatusReport:
    job_id: str
    status: JobStatus
    progress: int
