"""Storage Provider Interface

Blob storage for evidence photographs and tracking QR images. Backends
implement the five primitives; the byte-level helpers are shared.
"""

from abc import ABC, abstractmethod
from io import BytesIO
from typing import AsyncGenerator, BinaryIO

from custody_service.core.errors import InternalError, NotFoundError


class BlobNotFoundError(NotFoundError):
    default_message = "Stored file not found"


class StorageUnavailableError(InternalError):
    default_message = "File storage is unavailable"


class StorageProvider(ABC):
    """Deployment-neutral blob storage.

    Keys are relative paths such as ``evidence_photos/<evidence_id>.jpg``;
    records keep the key, never a backend-specific URL.
    """

    @abstractmethod
    async def upload(self, file_stream: BinaryIO, key: str, content_type: str) -> str:
        """Store a blob under key.

        Args:
            file_stream: Binary stream (implementations rewind it)
            key: Storage key
            content_type: MIME type, e.g. "image/png"

        Returns:
            The key the blob was stored under

        Raises:
            StorageUnavailableError: If the backend rejects the write
        """

    @abstractmethod
    async def download_stream(self, key: str) -> AsyncGenerator[bytes, None]:
        """Yield the blob in chunks.

        Raises:
            BlobNotFoundError: If nothing is stored under key
            StorageUnavailableError: If the backend read fails
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a blob; False if it was absent or could not be removed."""

    @abstractmethod
    async def file_exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def put_bytes(self, content: bytes, key: str, content_type: str) -> str:
        return await self.upload(BytesIO(content), key, content_type)

    async def read_bytes(self, key: str) -> bytes:
        """Read a whole blob into memory (photographs and QR images are small)"""
        chunks = []
        async for chunk in self.download_stream(key):
            chunks.append(chunk)
        return b"".join(chunks)
