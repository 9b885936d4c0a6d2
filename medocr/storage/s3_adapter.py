import asyncio
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from medocr.storage.base import BaseStorageClient
from medocr.storage.exceptions import MetadataLookupError
from medocr.storage.models import ObjectMetadata

PAGE_COUNT_METADATA_KEY = "page-count"


class S3StorageAdapter(BaseStorageClient):
    """Reads object metadata from S3.

    Uploaders may set the `x-amz-meta-page-count` header; it becomes the
    page count hint.
    """

    def __init__(
        self,
        *,
        bucket_name: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
        client: Any = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
        )

    async def head_object(self, document_ref: str) -> ObjectMetadata:
        try:
            response = await asyncio.to_thread(
                self._client.head_object, Bucket=self._bucket_name, Key=document_ref
            )
        except (ClientError, BotoCoreError) as exc:
            raise MetadataLookupError(
                f"S3 head_object failed for {document_ref}: {exc}"
            ) from exc
        return ObjectMetadata(
            size_bytes=int(response.get("ContentLength") or 0),
            page_count_hint=_parse_page_count(
                (response.get("Metadata") or {}).get(PAGE_COUNT_METADATA_KEY)
            ),
            content_type=response.get("ContentType"),
        )


def _parse_page_count(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        pages = int(raw)
    except ValueError:
        return None
    return pages if pages > 0 else None
