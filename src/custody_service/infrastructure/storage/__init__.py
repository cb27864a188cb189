"""Storage infrastructure module.

Blob storage for evidence photographs and tracking QR images.
"""

from custody_service.infrastructure.storage.factory import create_storage_provider
from custody_service.infrastructure.storage.provider import (
    BlobNotFoundError,
    StorageProvider,
    StorageUnavailableError,
)
from custody_service.infrastructure.storage.local_storage import LocalStorage
from custody_service.infrastructure.storage.s3_storage import S3Storage

__all__ = [
    "create_storage_provider",
    "BlobNotFoundError",
    "StorageProvider",
    "StorageUnavailableError",
    "LocalStorage",
    "S3Storage",
]
