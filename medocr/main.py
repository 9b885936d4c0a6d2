"""medocr command line interface."""

import asyncio
import json
from typing import Optional

import typer

from medocr.backend.exceptions import OcrBackendError
from medocr.backend.factory import OcrBackendFactory
from medocr.backend.models import JobKind
from medocr.config.settings import Settings
from medocr.logging.logger import Log
from medocr.processor.exceptions import ProcessingError
from medocr.processor.models import ProcessingOptions
from medocr.processor.processor import build_processor
from medocr.worker.job_runner import JobRunner
from medocr.worker.poller import JobPoller

app = typer.Typer(
    name="medocr",
    help="OCR extraction pipeline for scanned medical documents",
    add_completion=False,
)


@app.command()
def process(
    document_ref: str = typer.Argument(..., help="Storage key of the document"),
    forms: bool = typer.Option(False, "--forms", help="Extract key/value form fields"),
    tables: bool = typer.Option(False, "--tables", help="Extract tables"),
    query: Optional[list[str]] = typer.Option(None, "--query", help="Custom query (repeatable)"),
    threshold: Optional[float] = typer.Option(
        None, "--threshold", min=0.0, max=1.0, help="Confidence threshold for auto-accept"
    ),
    review: bool = typer.Option(False, "--review", help="Always route to human review"),
    include_blocks: bool = typer.Option(False, "--include-blocks", help="Keep raw blocks"),
) -> None:
    """Process one document and print the result as JSON."""
    settings = _load_settings()
    queries = tuple(query or ())
    options = ProcessingOptions(
        enable_forms=forms,
        enable_tables=tables,
        enable_queries=bool(queries),
        custom_queries=queries,
        confidence_threshold=(
            threshold if threshold is not None else settings.default_confidence_threshold
        ),
        require_human_review=review,
        include_blocks=include_blocks,
    )
    processor = build_processor(settings)
    try:
        document = asyncio.run(processor.process_document(document_ref, options))
    except ProcessingError as exc:
        if exc.document is not None:
            typer.echo(json.dumps(exc.document.to_dict(), indent=2))
        typer.echo(f"Processing failed: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(document.to_dict(), indent=2))


@app.command("job-status")
def job_status(
    job_id: str = typer.Argument(..., help="OCR backend job id"),
    analysis: bool = typer.Option(
        True, "--analysis/--detection", help="Job was a document analysis or text detection"
    ),
) -> None:
    """Show the status of an asynchronous OCR job."""
    settings = _load_settings()
    backend = OcrBackendFactory.create(settings)
    runner = JobRunner(
        backend,
        JobPoller(backend, settings.job_poll_interval_seconds, settings.job_timeout_seconds),
    )
    kind = JobKind.DOCUMENT_ANALYSIS if analysis else JobKind.TEXT_DETECTION
    try:
        report = asyncio.run(runner.get_job_status(job_id, kind))
    except OcrBackendError as exc:
        typer.echo(f"Status check failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(
        json.dumps(
            {"job_id": report.job_id, "status": report.status.value, "progress": report.progress}
        )
    )


def _load_settings() -> Settings:
    settings = Settings()
    Log.configure(settings.log_level)
    return settings


def main() -> None:
    app()


if __name__ == "__main__":
    main()
