"""Base object storage with bucket-relative paths and public URLs."""
from abc import ABC, abstractmethod

from shopadmin.config import Config


class BaseStorage(ABC):
    """Object storage for product images.

    Paths are relative to the bucket (e.g. "products/1700000000-ab12.png").
    Implementations raise AppException(ErrorType.STORAGE_ERROR) on failure.
    """

    def __init__(self, bucket: str = None, public_base_url: str = None):
        self.bucket = bucket or Config.STORAGE_BUCKET
        self.public_base_url = (public_base_url or Config.STORAGE_PUBLIC_URL).rstrip("/")

    @abstractmethod
    async def ensure_bucket(self) -> bool:
        """Create the bucket if missing. Returns True when it was created."""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store `data` under `path` and return its public URL."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a single object."""

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> str | None:
        """Bucket-relative path of a public URL, or None if it is not ours."""
        prefix = f"{self.public_base_url}/{self.bucket}/"
        if not url or not url.startswith(prefix):
            return None
        path = url[len(prefix):]
        return path or None
