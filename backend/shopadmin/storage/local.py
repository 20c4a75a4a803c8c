"""Filesystem storage backend, served by the app under /media."""
import asyncio
import logging
from pathlib import Path

from shopadmin.config import Config
from shopadmin.errors import ErrorType
from shopadmin.exceptions import AppException
from shopadmin.storage.base import BaseStorage

logger = logging.getLogger(__name__)


class LocalStorage(BaseStorage):
    """Stores objects as files under <root>/<bucket>/<path>."""

    def __init__(self, root: str | Path = None, bucket: str = None, public_base_url: str = None):
        super().__init__(bucket=bucket, public_base_url=public_base_url)
        self.root = Path(root or Config.STORAGE_DIR)

    @property
    def bucket_dir(self) -> Path:
        return self.root / self.bucket

    def _resolve(self, path: str) -> Path:
        bucket_dir = self.bucket_dir.resolve()
        target = (bucket_dir / path).resolve()
        if bucket_dir not in target.parents:
            raise AppException(ErrorType.STORAGE_ERROR, f"Invalid object path: {path}")
        return target

    async def ensure_bucket(self) -> bool:
        if self.bucket_dir.is_dir():
            logger.info(f"Storage bucket '{self.bucket}' already exists")
            return False

        try:
            await asyncio.to_thread(self.bucket_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise AppException(
                ErrorType.STORAGE_ERROR,
                f"Failed to create {self.bucket} bucket: {e}"
            )
        logger.info(f"Storage bucket '{self.bucket}' created")
        return True

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        if target.exists():
            # Uploads never overwrite
            raise AppException(ErrorType.STORAGE_ERROR, f"Failed to upload image: {path} already exists")

        def write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise AppException(ErrorType.STORAGE_ERROR, f"Failed to upload image: {e}")

        logger.info(f"Stored {path} ({len(data)} bytes, {content_type})")
        return self.public_url(path)

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.unlink)
        except OSError as e:
            raise AppException(ErrorType.STORAGE_ERROR, f"Failed to delete image: {e}")
        logger.info(f"Deleted {path}")
