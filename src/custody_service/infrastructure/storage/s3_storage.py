"""S3 / MinIO Storage

Blobs live in one bucket of an S3-compatible object store. All calls go
through aioboto3; a fresh client is opened per operation.
"""

import logging
import os
from typing import AsyncGenerator, BinaryIO, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from custody_service.infrastructure.storage.provider import (
    BlobNotFoundError,
    StorageProvider,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536
MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3Storage(StorageProvider):
    """Bucket-backed storage for AWS S3 or a self-hosted MinIO"""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None
    ):
        """
        Raises:
            ValueError: If no bucket is configured
        """
        self.bucket_name = bucket_name or os.getenv("S3_BUCKET_NAME")
        if not self.bucket_name:
            raise ValueError("S3_BUCKET_NAME environment variable or bucket_name parameter is required")

        self.region = region or os.getenv("S3_REGION", "us-east-1")
        self.endpoint_url = endpoint_url or os.getenv("S3_ENDPOINT_URL")

        # Missing keys fall back to the standard boto3 credential chain
        self.session = aioboto3.Session(
            aws_access_key_id=access_key or os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=secret_key or os.getenv("AWS_SECRET_ACCESS_KEY"),
            region_name=self.region
        )
        logger.info(f"S3 storage using bucket {self.bucket_name} at {self.endpoint_url or 'AWS'}")

    def _client(self):
        return self.session.client("s3", region_name=self.region, endpoint_url=self.endpoint_url)

    async def upload(self, file_stream: BinaryIO, key: str, content_type: str) -> str:
        file_stream.seek(0)
        try:
            async with self._client() as s3:
                await s3.upload_fileobj(
                    file_stream,
                    self.bucket_name,
                    key,
                    ExtraArgs={"ContentType": content_type}
                )
        except ClientError as e:
            logger.error(f"S3 upload of {key} failed ({_error_code(e)}): {e}")
            raise StorageUnavailableError(f"Could not store {key}")
        except BotoCoreError as e:
            logger.error(f"S3 upload of {key} failed: {e}")
            raise StorageUnavailableError(f"Could not store {key}")

        logger.info(f"Stored {content_type} blob s3://{self.bucket_name}/{key}")
        return key

    async def download_stream(self, key: str) -> AsyncGenerator[bytes, None]:
        async with self._client() as s3:
            try:
                response = await s3.get_object(Bucket=self.bucket_name, Key=key)
                async for chunk in response["Body"].iter_chunks(chunk_size=CHUNK_SIZE):
                    yield chunk
            except ClientError as e:
                code = _error_code(e)
                if code in MISSING_KEY_CODES:
                    logger.warning(f"Blob not found in S3: {key}")
                    raise BlobNotFoundError()
                logger.error(f"S3 read of {key} failed ({code}): {e}")
                raise StorageUnavailableError(f"Could not read {key}")

    async def delete(self, key: str) -> bool:
        """S3 reports success for absent keys too."""
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 delete of {key} failed: {e}")
            return False

        logger.info(f"Deleted blob s3://{self.bucket_name}/{key}")
        return True

    async def file_exists(self, key: str) -> bool:
        try:
            async with self._client() as s3:
                await s3.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) not in MISSING_KEY_CODES:
                logger.error(f"S3 existence check for {key} failed: {e}")
            return False

    async def health_check(self) -> bool:
        """Bucket is reachable with the configured credentials"""
        try:
            async with self._client() as s3:
                await s3.head_bucket(Bucket=self.bucket_name)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 health check failed: {e}")
            return False
