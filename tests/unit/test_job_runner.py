from unittest.mock import AsyncMock, MagicMock

import pytest

from medocr.backend.base import BaseOcrBackend
from medocr.backend.models import (
    AnalysisResult,
    ExecutionMode,
    FeatureType,
    JobKind,
    JobPage,
    JobStatus,
)
from medocr.processor.models import ProcessingOptions
from medocr.worker.job_runner import JobRunner, estimate_progress
from medocr.worker.poller import JobOutcome, JobPoller
from tests.block_builders import raw_word


def _make_runner() -> tuple[JobRunner, MagicMock, MagicMock]:
    """Create a JobRunner with mocked backend and poller."""
    backend = MagicMock(spec=BaseOcrBackend)
    backend.detect_text.return_value = AnalysisResult(raw_blocks=[raw_word("w-1", "text")])
    backend.analyze_document.return_value = AnalysisResult(raw_blocks=[raw_word("w-2", "form")])
    backend.start_detection.return_value = "job-detect"
    backend.start_analysis.return_value = "job-analysis"
    poller = MagicMock(spec=JobPoller)
    poller.wait = AsyncMock(
        return_value=JobOutcome(raw_blocks=[raw_word("w-3", "async")], warnings=["W"])
    )
    return JobRunner(backend, poller), backend, poller


class TestSyncRun:
    async def test_plain_text_uses_detection(self) -> None:
        runner, backend, poller = _make_runner()

        result = await runner.run("docs/a.pdf", ProcessingOptions(), ExecutionMode.SYNC)

        backend.detect_text.assert_awaited_once_with("docs/a.pdf")
        backend.analyze_document.assert_not_awaited()
        poller.wait.assert_not_awaited()
        assert result.mode is ExecutionMode.SYNC
        assert result.job_id is None
        assert result.raw_blocks[0]["Id"] == "w-1"

    async def test_forms_use_analysis(self) -> None:
        runner, backend, _poller = _make_runner()
        options = ProcessingOptions(enable_forms=True, enable_tables=True)

        result = await runner.run("docs/a.pdf", options, ExecutionMode.SYNC)

        backend.analyze_document.assert_awaited_once_with(
            "docs/a.pdf", (FeatureType.FORMS, FeatureType.TABLES), ()
        )
        backend.detect_text.assert_not_awaited()
        assert result.raw_blocks[0]["Id"] == "w-2"

    async def test_queries_are_forwarded(self) -> None:
        runner, backend, _poller = _make_runner()
        options = ProcessingOptions(enable_queries=True, custom_queries=["Patient name?"])

        await runner.run("docs/a.pdf", options, ExecutionMode.SYNC)

        backend.analyze_document.assert_awaited_once_with(
            "docs/a.pdf", (FeatureType.QUERIES,), ("Patient name?",)
        )


class TestAsyncRun:
    async def test_plain_text_starts_detection_job(self) -> None:
        runner, backend, poller = _make_runner()

        result = await runner.run("docs/a.pdf", ProcessingOptions(), ExecutionMode.ASYNC)

        backend.start_detection.assert_awaited_once_with("docs/a.pdf")
        poller.wait.assert_awaited_once_with("job-detect", JobKind.TEXT_DETECTION)
        assert result.mode is ExecutionMode.ASYNC
        assert result.job_id == "job-detect"
        assert result.warnings == ["W"]
        assert result.raw_blocks[0]["Id"] == "w-3"

    async def test_tables_start_analysis_job(self) -> None:
        runner, backend, poller = _make_runner()

        result = await runner.run(
            "docs/a.pdf", ProcessingOptions(enable_tables=True), ExecutionMode.ASYNC
        )

        backend.start_analysis.assert_awaited_once_with("docs/a.pdf", (FeatureType.TABLES,), ())
        backend.start_detection.assert_not_awaited()
        poller.wait.assert_awaited_once_with("job-analysis", JobKind.DOCUMENT_ANALYSIS)
        assert result.job_id == "job-analysis"

    async def test_poller_errors_propagate(self) -> None:
        runner, _backend, poller = _make_runner()
        poller.wait.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await runner.run("docs/a.pdf", ProcessingOptions(), ExecutionMode.ASYNC)


class TestJobStatus:
    async def test_reports_status_and_progress(self) -> None:
        runner, backend, _poller = _make_runner()
        backend.get_job.return_value = JobPage(status=JobStatus.IN_PROGRESS)

        report = await runner.get_job_status("job-1", JobKind.DOCUMENT_ANALYSIS)

        backend.get_job.assert_awaited_once_with("job-1", JobKind.DOCUMENT_ANALYSIS)
        assert report.job_id == "job-1"
        assert report.status is JobStatus.IN_PROGRESS
        assert report.progress == 50

    @pytest.mark.parametrize(
        ("status", "progress"),
        [
            (JobStatus.SUCCEEDED, 100),
            (JobStatus.PARTIAL_SUCCESS, 100),
            (JobStatus.IN_PROGRESS, 50),
            (JobStatus.FAILED, 0),
        ],
    )
    def test_estimate_progress(self, status: JobStatus, progress: int) -> None:
        assert estimate_progress(status) == progress
