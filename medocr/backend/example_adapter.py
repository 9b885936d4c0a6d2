"""Example OCR backend adapter.

Use this module as a reference when implementing new backend adapters.
Implement BaseOcrBackend and register the backend in OcrBackendFactory.
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, ClassVar

from medocr.backend.base import BaseOcrBackend
from medocr.backend.exceptions import BackendCallError
from medocr.backend.models import AnalysisResult, FeatureType, JobKind, JobPage, JobStatus


class ExampleBackendAdapter(BaseOcrBackend):
    """Offline backend that replays Textract-shaped blocks.

    No network calls. Blocks come from a JSON fixture (either a list of blocks
    or an object with a "Blocks" key) or are passed in directly. Job results
    are split into pages of `page_size` blocks so continuation handling can be
    exercised locally. Started job ids are kept for the adapter's lifetime, so
    create a fresh adapter per run or test when that matters.
    """

    DEFAULT_BLOCKS: ClassVar[list[dict[str, Any]]] = [
        {"Id": "page-1", "BlockType": "PAGE", "Confidence": 99.0, "Page": 1,
         "Relationships": [{"Type": "CHILD", "Ids": ["line-1"]}]},
        {"Id": "line-1", "BlockType": "LINE", "Confidence": 98.0, "Page": 1,
         "Text": "Example document",
         "Relationships": [{"Type": "CHILD", "Ids": ["word-1", "word-2"]}]},
        {"Id": "word-1", "BlockType": "WORD", "Confidence": 98.0, "Page": 1, "Text": "Example"},
        {"Id": "word-2", "BlockType": "WORD", "Confidence": 97.0, "Page": 1, "Text": "document"},
    ]

    def __init__(
        self,
        *,
        fixture_path: Path | None = None,
        blocks: list[dict[str, Any]] | None = None,
        page_size: int = 1000,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._blocks = blocks if blocks is not None else self._load(fixture_path)
        self._page_size = page_size
        self._jobs: dict[str, JobKind] = {}

    async def detect_text(self, document_ref: str) -> AnalysisResult:
        _ = document_ref
        return AnalysisResult(raw_blocks=list(self._blocks))

    async def analyze_document(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> AnalysisResult:
        _ = document_ref, features, queries
        return AnalysisResult(raw_blocks=list(self._blocks))

    async def start_detection(self, document_ref: str) -> str:
        return self._register(document_ref, JobKind.TEXT_DETECTION)

    async def start_analysis(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> str:
        _ = features, queries
        return self._register(document_ref, JobKind.DOCUMENT_ANALYSIS)

    async def get_job(
        self,
        job_id: str,
        kind: JobKind,
        continuation_token: str | None = None,
    ) -> JobPage:
        if self._jobs.get(job_id) is not kind:
            raise BackendCallError(f"Unknown {kind.value} job {job_id}")
        start = int(continuation_token or 0)
        end = start + self._page_size
        return JobPage(
            status=JobStatus.SUCCEEDED,
            raw_blocks=list(self._blocks[start:end]),
            continuation_token=str(end) if end < len(self._blocks) else None,
        )

    def _register(self, document_ref: str, kind: JobKind) -> str:
        job_id = f"example-{kind.value.lower()}-{len(self._jobs) + 1}"
        self._jobs[job_id] = kind
        _ = document_ref
        return job_id

    @classmethod
    def _load(cls, fixture_path: Path | None) -> list[dict[str, Any]]:
        if fixture_path is None:
            return list(cls.DEFAULT_BLOCKS)
        try:
            data = json.loads(fixture_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BackendCallError(f"Failed to load OCR fixture {fixture_path}: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("Blocks", [])
        if not isinstance(data, list):
            raise BackendCallError(f"OCR fixture {fixture_path} must hold a list of blocks")
        return data
