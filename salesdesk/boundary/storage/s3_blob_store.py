"""
S3 blob store.

Reads, writes and deletes uploaded documents in the documents bucket.
boto3 is synchronous, so each call runs in a worker thread.

Dependencies: boto3, botocore
System role: Raw document storage for upload and extraction
"""

import asyncio
import logging
from typing import Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from salesdesk.core.exceptions import BlobNotFoundError, BlobStoreError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3BlobStore:
    """S3 implementation of the BlobStore protocol."""

    def __init__(
        self,
        region: str = "ap-south-1",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        """
        Initialize S3 blob store.

        Args:
            region: AWS region for the bucket
            endpoint_url: Custom endpoint for S3-compatible stores
            client: Preconfigured boto3 S3 client (tests, custom sessions)
        """
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    async def get(self, bucket: str, path: str) -> bytes:
        """
        Download an object.

        Args:
            bucket: Bucket name
            path: Object key

        Returns:
            bytes: Object body

        Raises:
            BlobNotFoundError: When the object does not exist
            BlobStoreError: For any other S3 failure
        """
        try:
            return await asyncio.to_thread(self._get_sync, bucket, path)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in _NOT_FOUND_CODES:
                raise BlobNotFoundError(bucket, path) from e
            raise BlobStoreError(
                f"S3 get failed ({error_code}): {path}",
                operation="get",
                details={"bucket": bucket},
            ) from e
        except BotoCoreError as e:
            raise BlobStoreError(f"S3 get failed: {e}", operation="get") from e

    def _get_sync(self, bucket: str, path: str) -> bytes:
        response = self._s3_client.get_object(Bucket=bucket, Key=path)
        return response["Body"].read()

    async def put(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """
        Upload an object.

        Args:
            bucket: Bucket name
            path: Object key
            data: Object body
            content_type: MIME type stored with the object

        Returns:
            str: The object key

        Raises:
            BlobStoreError: When the upload fails
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(
                f"S3 put failed: {e}",
                operation="put",
                details={"bucket": bucket, "path": path},
            ) from e
        logger.info(
            f"{__name__}:put - Stored object",
            extra={"bucket": bucket, "path": path, "size_bytes": len(data)},
        )
        return path

    async def delete(self, bucket: str, paths: Sequence[str]) -> None:
        """
        Delete objects in one request.

        Raises:
            BlobStoreError: When the request fails or S3 reports per-key errors
        """
        if not paths:
            return
        try:
            response = await asyncio.to_thread(
                self._s3_client.delete_objects,
                Bucket=bucket,
                Delete={"Objects": [{"Key": path} for path in paths], "Quiet": True},
            )
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(f"S3 delete failed: {e}", operation="delete") from e

        errors = response.get("Errors") or []
        if errors:
            raise BlobStoreError(
                f"S3 delete failed for {len(errors)} object(s)",
                operation="delete",
                details={"keys": [err.get("Key") for err in errors]},
            )
