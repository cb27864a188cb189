"""Storage Provider Factory

Chooses between local filesystem and S3 based on the STORAGE_PROVIDER env var.
The application builds one provider at startup and hands it to the services.
"""

import logging
import os

from custody_service.infrastructure.storage.provider import StorageProvider
from custody_service.infrastructure.storage.local_storage import LocalStorage
from custody_service.infrastructure.storage.s3_storage import S3Storage

logger = logging.getLogger(__name__)


def create_storage_provider() -> StorageProvider:
    """Create the storage provider described by the environment.

    Environment Variables:
        STORAGE_PROVIDER: "local" or "s3" (default: "local")

        For local storage:
            STORAGE_LOCAL_PATH: Base directory (default: "./data/uploads")

        For S3 storage:
            S3_BUCKET_NAME: S3 bucket name (required)
            S3_REGION: AWS region (default: "us-east-1")
            S3_ENDPOINT_URL: Custom endpoint for MinIO/LocalStack (optional)
            AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: optional, boto3 defaults otherwise

    Example:
        ```python
        # Station server (docker-compose)
        STORAGE_PROVIDER=local
        STORAGE_LOCAL_PATH=/data/malkhana

        # MinIO
        STORAGE_PROVIDER=s3
        S3_BUCKET_NAME=malkhana-evidence
        S3_ENDPOINT_URL=http://minio:9000
        ```
    """
    provider_type = os.getenv("STORAGE_PROVIDER", "local").lower()

    logger.info(f"Initializing storage provider: {provider_type}")

    if provider_type == "s3":
        bucket_name = os.getenv("S3_BUCKET_NAME")
        endpoint_url = os.getenv("S3_ENDPOINT_URL")

        storage = S3Storage(
            bucket_name=bucket_name,
            region=os.getenv("S3_REGION", "us-east-1"),
            endpoint_url=endpoint_url,
            access_key=os.getenv("AWS_ACCESS_KEY_ID"),
            secret_key=os.getenv("AWS_SECRET_ACCESS_KEY")
        )

        logger.info(f"S3 storage provider initialized: bucket={bucket_name}, endpoint={endpoint_url or 'AWS'}")
        return storage

    local_path = os.getenv("STORAGE_LOCAL_PATH", "./data/uploads")
    storage = LocalStorage(base_path=local_path)

    logger.info(f"Local storage provider initialized: path={local_path}")
    return storage
