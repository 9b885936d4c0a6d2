import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from medocr.backend.base import BaseOcrBackend
from medocr.backend.exceptions import (
    BackendCallError,
    JobCancelledError,
    JobFailedError,
    JobTimeoutError,
)
from medocr.backend.models import JobKind, JobPage
from medocr.logging.logger import Log


@dataclass(frozen=True)
class JobOutcome:
    """Every block of a finished job, accumulated across continuation pages."""

    raw_blocks: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    pages_fetched: int = 0


class JobPoller:
    """Poll loop: get job -> check status -> sleep.

    Waiting is a cooperative `asyncio.sleep`, so cancelling the awaiting task
    stops polling immediately.
    """

    def __init__(
        self,
        backend: BaseOcrBackend,
        poll_interval_seconds: float,
        timeout_seconds: float,
    ) -> None:
        self._backend = backend
        self._poll_interval_seconds = poll_interval_seconds
        self._timeout_seconds = timeout_seconds

    async def wait(self, job_id: str, kind: JobKind) -> JobOutcome:
        """Poll until the job finishes and return all of its blocks.

        Each status call is bounded by what is left of the timeout, so a
        call that hangs fails the wait instead of blocking it.

        Raises:
            JobFailedError: the backend reported the job as failed.
            JobTimeoutError: the job did not finish within the timeout.
            JobCancelledError: the awaiting task was cancelled.
            BackendCallError: a status call itself failed.
        """
        started = time.monotonic()
        try:
            while True:
                elapsed = time.monotonic() - started
                if elapsed >= self._timeout_seconds:
                    raise JobTimeoutError(job_id, elapsed)
                page = await self._get_status(job_id, kind, started, elapsed)
                if page.status.is_success:
                    return await self._collect(job_id, kind, page)
                if page.status.is_terminal:
                    raise JobFailedError(job_id, page.status_message)
                elapsed = time.monotonic() - started
                if elapsed >= self._timeout_seconds:
                    raise JobTimeoutError(job_id, elapsed)
                Log.debug(f"OCR job {job_id} still {page.status.value}, sleeping")
                await asyncio.sleep(
                    min(self._poll_interval_seconds, self._timeout_seconds - elapsed)
                )
        except asyncio.CancelledError as exc:
            Log.warning(f"Stopped polling OCR job {job_id}: cancelled")
            raise JobCancelledError(job_id) from exc

    async def _get_status(
        self, job_id: str, kind: JobKind, started: float, elapsed: float
    ) -> JobPage:
        try:
            return await asyncio.wait_for(
                self._backend.get_job(job_id, kind),
                timeout=self._timeout_seconds - elapsed,
            )
        except asyncio.TimeoutError as exc:
            Log.warning(f"Status call for OCR job {job_id} did not return in time")
            raise JobTimeoutError(job_id, time.monotonic() - started) from exc

    async def _collect(self, job_id: str, kind: JobKind, first: JobPage) -> JobOutcome:
        raw_blocks = list(first.raw_blocks)
        warnings = list(first.warnings)
        pages_fetched = 1
        seen_tokens: set[str] = set()
        token = first.continuation_token
        while token:
            if token in seen_tokens:
                raise BackendCallError(
                    f"OCR job {job_id} returned continuation token {token!r} twice"
                )
            seen_tokens.add(token)
            page = await self._backend.get_job(job_id, kind, continuation_token=token)
            raw_blocks.extend(page.raw_blocks)
            warnings.extend(page.warnings)
            pages_fetched += 1
            token = page.continuation_token
        Log.info(
            f"Collected {len(raw_blocks)} blocks for OCR job {job_id} "
            f"across {pages_fetched} result pages"
        )
        return JobOutcome(raw_blocks=raw_blocks, warnings=warnings, pages_fetched=pages_fetched)
