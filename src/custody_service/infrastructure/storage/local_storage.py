"""Local Filesystem Storage

Blobs live under one base directory on the station server. File I/O goes
through aiofiles so uploads do not block the event loop.
"""

import logging
import os
from pathlib import Path
from typing import AsyncGenerator, BinaryIO, Optional

import aiofiles

from custody_service.core.errors import BadRequestError
from custody_service.infrastructure.storage.provider import (
    BlobNotFoundError,
    StorageProvider,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536  # 64KB


class LocalStorage(StorageProvider):
    """Filesystem-backed storage for development and single-station deployments"""

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or os.getenv("STORAGE_LOCAL_PATH", "./data/uploads")).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local storage rooted at {self.base_path}")

    def _resolve(self, key: str) -> Path:
        """Map a key to a path inside base_path

        Raises:
            BadRequestError: If the key escapes the base directory
        """
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path):
            logger.error(f"Rejected storage key outside base path: {key}")
            raise BadRequestError("Invalid storage key")
        return path

    async def upload(self, file_stream: BinaryIO, key: str, content_type: str) -> str:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_stream.seek(0)

        try:
            async with aiofiles.open(path, "wb") as out_file:
                while chunk := file_stream.read(CHUNK_SIZE):
                    await out_file.write(chunk)
        except OSError as e:
            logger.error(f"Writing {key} failed: {e}")
            raise StorageUnavailableError(f"Could not store {key}")

        logger.info(f"Stored {content_type} blob {key}")
        return key

    async def download_stream(self, key: str) -> AsyncGenerator[bytes, None]:
        path = self._resolve(key)
        if not path.is_file():
            logger.warning(f"Blob not found: {key}")
            raise BlobNotFoundError()

        try:
            async with aiofiles.open(path, "rb") as in_file:
                while chunk := await in_file.read(CHUNK_SIZE):
                    yield chunk
        except OSError as e:
            logger.error(f"Reading {key} failed: {e}")
            raise StorageUnavailableError(f"Could not read {key}")

    async def delete(self, key: str) -> bool:
        path = self._resolve(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Deleting {key} failed: {e}")
            return False

        logger.info(f"Deleted blob {key}")
        return True

    async def file_exists(self, key: str) -> bool:
        try:
            return self._resolve(key).is_file()
        except BadRequestError:
            return False

    async def health_check(self) -> bool:
        """Writable base directory"""
        marker = self.base_path / ".health_check"
        try:
            marker.touch()
            marker.unlink()
            return True
        except OSError as e:
            logger.error(f"Local storage health check failed: {e}")
            return False
