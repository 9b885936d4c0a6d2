import asyncio
from collections.abc import Callable, Sequence
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from medocr.backend.base import BaseOcrBackend
from medocr.backend.exceptions import BackendCallError
from medocr.backend.models import AnalysisResult, FeatureType, JobKind, JobPage, JobStatus


class TextractBackendAdapter(BaseOcrBackend):
    """OCR backend built on AWS Textract reading documents from one S3 bucket.

    boto3 clients are blocking, so each call runs in a worker thread.
    """

    def __init__(
        self,
        *,
        bucket_name: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
        output_prefix: str = "",
        client: Any = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._output_prefix = output_prefix.strip("/")
        self._client = client or boto3.client(
            "textract",
            region_name=region,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
        )

    async def detect_text(self, document_ref: str) -> AnalysisResult:
        response = await self._call(
            "DetectDocumentText",
            self._client.detect_document_text,
            Document=self._document(document_ref),
        )
        return AnalysisResult(raw_blocks=response.get("Blocks", []))

    async def analyze_document(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> AnalysisResult:
        kwargs: dict[str, Any] = {
            "Document": self._document(document_ref),
            "FeatureTypes": [feature.value for feature in features],
        }
        kwargs.update(self._queries_config(features, queries))
        response = await self._call("AnalyzeDocument", self._client.analyze_document, **kwargs)
        return AnalysisResult(raw_blocks=response.get("Blocks", []))

    async def start_detection(self, document_ref: str) -> str:
        kwargs: dict[str, Any] = {"DocumentLocation": self._document(document_ref)}
        kwargs.update(self._output_config(document_ref))
        response = await self._call(
            "StartDocumentTextDetection",
            self._client.start_document_text_detection,
            **kwargs,
        )
        return self._job_id(response)

    async def start_analysis(
        self,
        document_ref: str,
        features: Sequence[FeatureType],
        queries: Sequence[str] = (),
    ) -> str:
        kwargs: dict[str, Any] = {
            "DocumentLocation": self._document(document_ref),
            "FeatureTypes": [feature.value for feature in features],
        }
        kwargs.update(self._queries_config(features, queries))
        kwargs.update(self._output_config(document_ref))
        response = await self._call(
            "StartDocumentAnalysis",
            self._client.start_document_analysis,
            **kwargs,
        )
        return self._job_id(response)

    async def get_job(
        self,
        job_id: str,
        kind: JobKind,
        continuation_token: str | None = None,
    ) -> JobPage:
        kwargs: dict[str, Any] = {"JobId": job_id}
        if continuation_token:
            kwargs["NextToken"] = continuation_token
        if kind is JobKind.DOCUMENT_ANALYSIS:
            response = await self._call(
                "GetDocumentAnalysis", self._client.get_document_analysis, **kwargs
            )
        else:
            response = await self._call(
                "GetDocumentTextDetection", self._client.get_document_text_detection, **kwargs
            )
        return JobPage(
            status=JobStatus(response.get("JobStatus", JobStatus.IN_PROGRESS.value)),
            raw_blocks=response.get("Blocks", []),
            continuation_token=response.get("NextToken"),
            status_message=response.get("StatusMessage"),
            warnings=[_format_warning(warning) for warning in response.get("Warnings", [])],
        )

    def _document(self, document_ref: str) -> dict[str, Any]:
        return {"S3Object": {"Bucket": self._bucket_name, "Name": document_ref}}

    def _output_config(self, document_ref: str) -> dict[str, Any]:
        if not self._output_prefix:
            return {}
        return {
            "OutputConfig": {
                "S3Bucket": self._bucket_name,
                "S3Prefix": f"{self._output_prefix}/{document_ref.replace('/', '_')}",
            }
        }

    @staticmethod
    def _queries_config(
        features: Sequence[FeatureType], queries: Sequence[str]
    ) -> dict[str, Any]:
        if FeatureType.QUERIES not in features or not queries:
            return {}
        return {"QueriesConfig": {"Queries": [{"Text": query} for query in queries]}}

    @staticmethod
    def _job_id(response: dict[str, Any]) -> str:
        job_id = response.get("JobId")
        if not job_id:
            raise BackendCallError("Textract did not return a job id")
        return str(job_id)

    @staticmethod
    async def _call(
        operation: str,
        method: Callable[..., dict[str, Any]],
        **kwargs: Any,
    ) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(method, **kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise BackendCallError(f"Textract {operation} failed: {exc}") from exc


def _format_warning(warning: dict[str, Any]) -> str:
    pages = ",".join(str(page) for page in warning.get("Pages", []))
    return f"{warning.get('ErrorCode')}: {pages}"
